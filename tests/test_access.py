import pytest

import access
from database import EntityKind
from schemas import AddGrade, Grade, SessionUser, DeleteClass, DeleteStudent


def ids(rows):
    return [r.id for r in rows]


@pytest.mark.parametrize("kind", list(EntityKind))
def test_admin_sees_everything(store, admin, kind):
    assert access.visible(store, kind, admin) == list(store.all(kind))


def test_admin_sees_everything_after_mutations(store, admin):
    store.dispatch(DeleteStudent(payload="2"))
    assert access.visible(store, EntityKind.STUDENT, admin) == list(store.students)


def test_anonymous_sees_nothing(store):
    for kind in EntityKind:
        assert access.visible(store, kind, None) == []


# -------------------- Teacher scope -------------------- #

def test_teacher_sees_grades_of_owned_classes(store, teacher):
    grades = access.visible(store, EntityKind.GRADE, teacher)
    assert "1" in ids(grades)
    assert "2" not in ids(grades)
    assert all(g.class_id in {"1", "2"} for g in grades)


def test_teacher_grade_visibility_matches_definition(store, teacher):
    store.dispatch(AddGrade(payload=Grade(id="g2", student_id="2", class_id="2", score=70)))
    store.dispatch(AddGrade(payload=Grade(id="g4", student_id="1", class_id="4", score=70)))
    own = {c.id for c in store.classes if c.teacher_id == "1"}
    expected = [g for g in store.grades if g.class_id in own]
    assert access.visible(store, EntityKind.GRADE, teacher) == expected
    assert ids(expected) == ["1", "g2"]


def test_teacher_classes_students_and_self(store, teacher):
    assert ids(access.visible(store, EntityKind.CLASS, teacher)) == ["1", "2"]
    # Class 1 enrolls students 1 and 5, class 2 enrolls student 2.
    assert ids(access.visible(store, EntityKind.STUDENT, teacher)) == ["1", "2", "5"]
    assert ids(access.visible(store, EntityKind.TEACHER, teacher)) == ["1"]


def test_teacher_attendance_and_queries(store, teacher):
    assert ids(access.visible(store, EntityKind.ATTENDANCE, teacher)) == ["1", "4"]
    assert ids(access.visible(store, EntityKind.QUERY, teacher)) == ["1"]


def test_teacher_loses_rows_when_class_deleted(store, teacher):
    store.dispatch(DeleteClass(payload="1"))
    assert ids(access.visible(store, EntityKind.GRADE, teacher)) == []
    assert ids(access.visible(store, EntityKind.STUDENT, teacher)) == ["2"]


def test_available_students(store, teacher, admin):
    assert ids(access.available_students(store, teacher)) == ["3", "4"]
    assert access.available_students(store, admin) == []


# -------------------- Student scope -------------------- #

def test_student_sees_only_own_attendance(store, student):
    rows = access.visible(store, EntityKind.ATTENDANCE, student)
    assert ids(rows) == ["1"]
    assert all(a.student_id == "1" for a in rows)


def test_student_classes_teachers_and_self(store, student):
    # Student 1 is enrolled in classes 1, 4 and 8.
    assert ids(access.visible(store, EntityKind.CLASS, student)) == ["1", "4", "8"]
    assert ids(access.visible(store, EntityKind.TEACHER, student)) == ["1", "2", "5"]
    assert ids(access.visible(store, EntityKind.STUDENT, student)) == ["1"]
    assert ids(access.visible(store, EntityKind.GRADE, student)) == ["1"]
    assert ids(access.visible(store, EntityKind.QUERY, student)) == ["1"]


# -------------------- Unresolved identities -------------------- #

@pytest.mark.parametrize("role,email", [
    ("teacher", "teacher@school.com"),
    ("student", "student@school.com"),
])
def test_unresolved_identity_sees_empty(store, role, email):
    user = SessionUser(id="x", email=email, name="Ghost", role=role)
    for kind in EntityKind:
        assert access.visible(store, kind, user) == []


def test_deleted_student_session_sees_empty(store, student):
    store.dispatch(DeleteStudent(payload="1"))
    assert access.visible(store, EntityKind.GRADE, student) == []


# -------------------- Authorization -------------------- #

def test_write_roles(admin, teacher, student):
    assert access.can_write(admin, EntityKind.STUDENT)
    assert not access.can_write(teacher, EntityKind.STUDENT)
    assert access.can_write(teacher, EntityKind.ATTENDANCE)
    assert not access.can_write(student, EntityKind.GRADE)
    assert access.can_write(student, EntityKind.QUERY)
    assert not access.can_write(None, EntityKind.QUERY)


def test_owns_class(store, admin, teacher, student):
    assert access.owns_class(store, admin, "7")
    assert access.owns_class(store, teacher, "2")
    assert not access.owns_class(store, teacher, "3")
    assert not access.owns_class(store, teacher, "missing")
    assert not access.owns_class(store, student, "1")


# -------------------- Joins -------------------- #

def test_dangling_references_render_placeholders(store):
    store.dispatch(DeleteStudent(payload="1"))
    row = access.join_grade(store, store.get(EntityKind.GRADE, "1"))
    assert row["student_name"] == access.UNKNOWN_STUDENT
    assert row["class_name"] == "Math Advanced"
    assert row["percentage"] == 92
    assert access.class_name(store, "404") == access.UNKNOWN_CLASS
    assert access.teacher_name(store, "404") == access.NO_TEACHER


def test_join_class_and_query(store):
    cls = access.join_class(store, store.get(EntityKind.CLASS, "1"))
    assert cls["teacher_name"] == "Dr. Sarah Johnson"
    assert cls["enrolled_count"] == 2
    q = access.join_query(store, store.get(EntityKind.QUERY, "2"))
    assert q["student_name"] == "Liam Rodriguez"
    assert q["teacher_name"] == "Mr. Michael Brown"
    assert q["class_name"] == "Physics Honors"


# -------------------- Search -------------------- #

@pytest.mark.parametrize("term", ["emma", "EMMA", "Emma"])
def test_search_students_case_insensitive(store, term):
    assert ids(access.search_students(store.students, term)) == ["1"]


def test_search_students_and_grade_filter(store):
    assert ids(access.search_students(store.students, "emma", "10")) == ["1"]
    assert ids(access.search_students(store.students, "emma", "11")) == []
    assert ids(access.search_students(store.students, "", "10")) == ["1", "5"]
    assert ids(access.search_students(store.students, "student.edu")) == ["1", "2", "3", "4", "5"]


def test_search_teachers_and_classes(store):
    assert ids(access.search_teachers(store.teachers, "physics")) == ["2"]
    assert ids(access.search_classes(store.classes, "english")) == ["6", "7"]
    assert ids(access.search_classes(store.classes, "lab")) == []


def test_search_grades(store):
    assert ids(access.search_grades(store, store.grades, "chem")) == ["3"]
    assert ids(access.search_grades(store, store.grades, "liam")) == ["2"]
    assert ids(access.search_grades(store, store.grades, None, "12")) == ["3"]


def test_search_attendance(store):
    assert ids(access.search_attendance(store, store.attendance, "math")) == ["1", "4"]
    assert ids(access.search_attendance(store, store.attendance, date="2024-01-16")) == ["5"]
    assert ids(access.search_attendance(store, store.attendance, "math", "2024-01-16")) == []


def test_filter_options(store):
    assert access.grade_levels(store.students) == ["10", "11", "12", "9"]
    assert access.attendance_dates(store.attendance) == ["2024-01-16", "2024-01-15"]
