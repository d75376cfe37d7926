"""
Role-scoped visibility, authorization and search over the store.

None of this lives in the store itself: the store hands out whole
collections and the caller narrows them here according to the session
identity. An identity that does not resolve to a Student/Teacher record
sees nothing, it is never an error.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

from database import EntityKind, SchoolStore
from schemas import (
    AttendanceRecord, Classroom, Grade, SessionUser, Student, StudentQuery, Teacher,
)
import analytics

UNKNOWN_STUDENT = "Unknown Student"
UNKNOWN_CLASS = "Unknown Class"
NO_TEACHER = "No teacher assigned"

# Roles allowed to create/modify rows of each kind.
WRITE_ROLES: Dict[EntityKind, FrozenSet[str]] = {
    EntityKind.STUDENT: frozenset({"admin"}),
    EntityKind.TEACHER: frozenset({"admin"}),
    EntityKind.CLASS: frozenset({"admin", "teacher"}),
    EntityKind.GRADE: frozenset({"admin", "teacher"}),
    EntityKind.ATTENDANCE: frozenset({"admin", "teacher"}),
    EntityKind.QUERY: frozenset({"admin", "teacher", "student"}),
}


# -------------------- Identity resolution -------------------- #

def resolve_teacher(store: SchoolStore, user: Optional[SessionUser]) -> Optional[Teacher]:
    if user is None or user.role != "teacher":
        return None
    return store.find_teacher_by_email(user.email)


def resolve_student(store: SchoolStore, user: Optional[SessionUser]) -> Optional[Student]:
    if user is None or user.role != "student":
        return None
    return store.find_student_by_email(user.email)


def owned_classes(store: SchoolStore, teacher: Teacher) -> List[Classroom]:
    return [c for c in store.classes if c.teacher_id == teacher.id]


def enrolled_classes(store: SchoolStore, student: Student) -> List[Classroom]:
    return [c for c in store.classes if student.id in c.enrolled_students]


# -------------------- Visibility -------------------- #

def visible(store: SchoolStore, kind: EntityKind, user: Optional[SessionUser]) -> List[Any]:
    """Rows of ``kind`` the given identity may see, in insertion order."""
    if user is None:
        return []
    if user.role == "admin":
        return list(store.all(kind))
    if user.role == "teacher":
        return _teacher_rows(store, kind, user)
    if user.role == "student":
        return _student_rows(store, kind, user)
    return []


def _teacher_rows(store: SchoolStore, kind: EntityKind, user: SessionUser) -> List[Any]:
    teacher = resolve_teacher(store, user)
    if teacher is None:
        return []
    own = owned_classes(store, teacher)
    own_ids = {c.id for c in own}
    match kind:
        case EntityKind.CLASS:
            return own
        case EntityKind.STUDENT:
            enrolled = enrolled_student_ids(own)
            return [s for s in store.students if s.id in enrolled]
        case EntityKind.TEACHER:
            return [t for t in store.teachers if t.id == teacher.id]
        case EntityKind.GRADE | EntityKind.ATTENDANCE | EntityKind.QUERY:
            return [r for r in store.all(kind) if r.class_id in own_ids]
    return []


def _student_rows(store: SchoolStore, kind: EntityKind, user: SessionUser) -> List[Any]:
    student = resolve_student(store, user)
    if student is None:
        return []
    match kind:
        case EntityKind.CLASS:
            return enrolled_classes(store, student)
        case EntityKind.STUDENT:
            return [s for s in store.students if s.id == student.id]
        case EntityKind.TEACHER:
            teacher_ids = {c.teacher_id for c in enrolled_classes(store, student)}
            return [t for t in store.teachers if t.id in teacher_ids]
        case EntityKind.GRADE | EntityKind.ATTENDANCE | EntityKind.QUERY:
            return [r for r in store.all(kind) if r.student_id == student.id]
    return []


def available_students(store: SchoolStore, user: Optional[SessionUser]) -> List[Student]:
    """Students not yet enrolled in any of the teacher's classes."""
    teacher = resolve_teacher(store, user)
    if teacher is None:
        return []
    enrolled = enrolled_student_ids(owned_classes(store, teacher))
    return [s for s in store.students if s.id not in enrolled]


# -------------------- Authorization -------------------- #

def can_write(user: Optional[SessionUser], kind: EntityKind) -> bool:
    return user is not None and user.role in WRITE_ROLES[kind]


def owns_class(store: SchoolStore, user: Optional[SessionUser], class_id: str) -> bool:
    """Admins own every class; teachers own classes whose teacher_id is theirs."""
    if user is None:
        return False
    if user.role == "admin":
        return True
    teacher = resolve_teacher(store, user)
    if teacher is None:
        return False
    cls = store.get(EntityKind.CLASS, class_id)
    return cls is not None and cls.teacher_id == teacher.id


# -------------------- Joins -------------------- #

def student_name(store: SchoolStore, student_id: str) -> str:
    student = store.get(EntityKind.STUDENT, student_id)
    return student.name if student else UNKNOWN_STUDENT


def class_name(store: SchoolStore, class_id: str) -> str:
    cls = store.get(EntityKind.CLASS, class_id)
    return cls.name if cls else UNKNOWN_CLASS


def teacher_name(store: SchoolStore, teacher_id: str) -> str:
    teacher = store.get(EntityKind.TEACHER, teacher_id)
    return teacher.name if teacher else NO_TEACHER


def join_grade(store: SchoolStore, grade: Grade) -> Dict[str, Any]:
    return {
        **grade.model_dump(),
        "student_name": student_name(store, grade.student_id),
        "class_name": class_name(store, grade.class_id),
        "percentage": analytics.grade_percentage(grade),
    }


def join_attendance(store: SchoolStore, record: AttendanceRecord) -> Dict[str, Any]:
    return {
        **record.model_dump(),
        "student_name": student_name(store, record.student_id),
        "class_name": class_name(store, record.class_id),
    }


def join_query(store: SchoolStore, query: StudentQuery) -> Dict[str, Any]:
    return {
        **query.model_dump(),
        "student_name": student_name(store, query.student_id),
        "teacher_name": teacher_name(store, query.teacher_id),
        "class_name": class_name(store, query.class_id),
    }


def join_class(store: SchoolStore, cls: Classroom) -> Dict[str, Any]:
    return {
        **cls.model_dump(),
        "teacher_name": teacher_name(store, cls.teacher_id),
        "enrolled_count": len(cls.enrolled_students),
    }


# -------------------- Search -------------------- #

def matches(term: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match against any field; blank term matches all."""
    if not term:
        return True
    needle = term.lower()
    return any(f is not None and needle in f.lower() for f in fields)


def search_students(students: Iterable[Student], term: Optional[str] = None,
                    grade: Optional[str] = None) -> List[Student]:
    return [
        s for s in students
        if matches(term, s.name, s.email) and (not grade or s.grade == grade)
    ]


def search_teachers(teachers: Iterable[Teacher], term: Optional[str] = None) -> List[Teacher]:
    return [t for t in teachers if matches(term, t.name, t.email, t.subject)]


def search_classes(classes: Iterable[Classroom], term: Optional[str] = None) -> List[Classroom]:
    return [c for c in classes if matches(term, c.name, c.subject)]


def search_grades(store: SchoolStore, grades: Iterable[Grade], term: Optional[str] = None,
                  grade_level: Optional[str] = None) -> List[Grade]:
    result = []
    for g in grades:
        student = store.get(EntityKind.STUDENT, g.student_id)
        cls = store.get(EntityKind.CLASS, g.class_id)
        found = matches(term, student.name if student else None, cls.name if cls else None, g.subject)
        # A grade whose student does not resolve has no grade level to match.
        level_ok = not grade_level or (student is not None and student.grade == grade_level)
        if found and level_ok:
            result.append(g)
    return result


def search_attendance(store: SchoolStore, records: Iterable[AttendanceRecord],
                      term: Optional[str] = None, date: Optional[str] = None) -> List[AttendanceRecord]:
    result = []
    for a in records:
        student = store.get(EntityKind.STUDENT, a.student_id)
        cls = store.get(EntityKind.CLASS, a.class_id)
        found = matches(term, student.name if student else None, cls.name if cls else None)
        if found and (not date or a.date == date):
            result.append(a)
    return result


def grade_levels(students: Iterable[Student]) -> List[str]:
    return sorted({s.grade for s in students})


def attendance_dates(records: Iterable[AttendanceRecord]) -> List[str]:
    return sorted({a.date for a in records}, reverse=True)


def enrolled_student_ids(classes: Iterable[Classroom]) -> Set[str]:
    return {sid for c in classes for sid in c.enrolled_students}
