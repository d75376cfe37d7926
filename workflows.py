"""
Multi-step operations performed by callers on top of the store's plain
add/update/delete mutations. Each one resolves its references first and
returns None (without mutating anything) when a reference does not resolve.
"""

from datetime import date as _date
from typing import Dict, List, Optional

from app_logger import get_logger
from database import EntityKind, SchoolStore
from schemas import (
    AddAttendance, AddGrade, AddQuery, AttendanceRecord, Classroom, DeleteAttendance,
    Grade, Student, StudentQuery, Teacher, UpdateClass, UpdateQuery, new_id,
)

logger = get_logger("workflows")


def today() -> str:
    return _date.today().isoformat()


def submit_attendance(store: SchoolStore, class_id: str, day: str,
                      statuses: Dict[str, str]) -> List[AttendanceRecord]:
    """
    Replace a class's attendance for one day.

    Every record of the new submission is built (and validated) before
    anything is touched; then every existing record for (class_id, day) is
    deleted and the new ones are added. A rejected status leaves the earlier
    submission in place, and re-submitting the same day never leaves
    duplicates or rows from the earlier submission.
    """
    stamp = new_id()
    created = [
        AttendanceRecord(
            id=f"{stamp}-{student_id}",
            student_id=student_id,
            class_id=class_id,
            date=day,
            status=status,
        )
        for student_id, status in statuses.items()
    ]

    stale = [a for a in store.attendance if a.class_id == class_id and a.date == day]
    for record in stale:
        store.dispatch(DeleteAttendance(payload=record.id))
    for record in created:
        store.dispatch(AddAttendance(payload=record))
    logger.info("Attendance for class %s on %s: replaced %d, recorded %d",
                class_id, day, len(stale), len(created))
    return created


def enroll_student(store: SchoolStore, class_id: str, student_id: str) -> Optional[Classroom]:
    cls = store.get(EntityKind.CLASS, class_id)
    if cls is None:
        return None
    if student_id in cls.enrolled_students:
        return cls
    updated = cls.model_copy(update={"enrolled_students": (*cls.enrolled_students, student_id)})
    store.dispatch(UpdateClass(payload=updated))
    logger.info("Enrolled student %s in class %s", student_id, class_id)
    return updated


def record_grade(store: SchoolStore, student_id: str, class_id: str, score: float,
                 max_score: float = 100, grade_type: str = "quiz", subject: str = "",
                 day: Optional[str] = None) -> Grade:
    # The class's subject wins over whatever the caller supplied.
    cls = store.get(EntityKind.CLASS, class_id)
    grade = Grade(
        id=new_id(),
        student_id=student_id,
        class_id=class_id,
        subject=cls.subject if cls else subject,
        score=score,
        max_score=max_score,
        date=day or today(),
        type=grade_type,
    )
    store.dispatch(AddGrade(payload=grade))
    return grade


def ask_question(store: SchoolStore, student: Student, class_id: str,
                 message: str) -> Optional[StudentQuery]:
    cls = store.get(EntityKind.CLASS, class_id)
    if cls is None:
        return None
    query = StudentQuery(
        id=new_id(),
        student_id=student.id,
        teacher_id=cls.teacher_id,
        class_id=cls.id,
        message=message,
        date=today(),
        status="pending",
    )
    store.dispatch(AddQuery(payload=query))
    return query


def answer_query(store: SchoolStore, query_id: str, response: str) -> Optional[StudentQuery]:
    query = store.get(EntityKind.QUERY, query_id)
    if query is None:
        return None
    answered = query.model_copy(update={"response": response, "status": "answered"})
    store.dispatch(UpdateQuery(payload=answered))
    return answered


def message_student(store: SchoolStore, teacher: Teacher, student_id: str,
                    message: str) -> Optional[StudentQuery]:
    """Teacher-initiated thread, attached to the first of the teacher's classes the student is in."""
    if store.get(EntityKind.STUDENT, student_id) is None:
        return None
    cls = next(
        (c for c in store.classes if c.teacher_id == teacher.id and student_id in c.enrolled_students),
        None,
    )
    if cls is None:
        return None
    query = StudentQuery(
        id=new_id(),
        student_id=student_id,
        teacher_id=teacher.id,
        class_id=cls.id,
        message=message,
        date=today(),
        status="pending",
        is_from_teacher=True,
    )
    store.dispatch(AddQuery(payload=query))
    return query
