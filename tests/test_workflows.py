import pytest
from pydantic import ValidationError

import workflows
from database import EntityKind
from schemas import AttendanceRecord, AddAttendance, new_id


def day_rows(store, class_id, day):
    return [a for a in store.attendance if a.class_id == class_id and a.date == day]


def test_attendance_retake_keeps_only_latest_submission(store):
    workflows.submit_attendance(store, "1", "2024-02-01", {"1": "present", "5": "absent"})
    workflows.submit_attendance(store, "1", "2024-02-01", {"1": "late", "5": "present"})

    rows = day_rows(store, "1", "2024-02-01")
    assert len(rows) == 2
    assert {a.student_id: a.status for a in rows} == {"1": "late", "5": "present"}


def test_attendance_retake_leaves_other_days_and_classes(store):
    before_other = [a for a in store.attendance if not (a.class_id == "1" and a.date == "2024-01-15")]
    workflows.submit_attendance(store, "1", "2024-01-15", {"1": "absent"})
    rows = day_rows(store, "1", "2024-01-15")
    assert [(a.student_id, a.status) for a in rows] == [("1", "absent")]
    assert all(a in store.attendance for a in before_other)


def test_attendance_retake_removes_manual_duplicates(store):
    dup = AttendanceRecord(id="dup", student_id="1", class_id="1", date="2024-01-15", status="late")
    store.dispatch(AddAttendance(payload=dup))
    assert len(day_rows(store, "1", "2024-01-15")) == 3
    workflows.submit_attendance(store, "1", "2024-01-15", {"1": "present", "5": "present"})
    assert len(day_rows(store, "1", "2024-01-15")) == 2


def test_attendance_ids_embed_student(store):
    created = workflows.submit_attendance(store, "2", "2024-02-02", {"2": "present"})
    assert created[0].id.endswith("-2")


def test_rejected_attendance_keeps_previous_submission(store):
    before = [(a.student_id, a.status) for a in day_rows(store, "1", "2024-01-15")]
    assert before == [("1", "present"), ("5", "absent")]
    with pytest.raises(ValidationError):
        workflows.submit_attendance(store, "1", "2024-01-15", {"1": "present", "5": "excused"})
    assert [(a.student_id, a.status) for a in day_rows(store, "1", "2024-01-15")] == before
    assert len(store.attendance) == 5


def test_enroll_student(store):
    cls = workflows.enroll_student(store, "2", "4")
    assert cls.enrolled_students == ("2", "4")
    assert store.get(EntityKind.CLASS, "2").enrolled_students == ("2", "4")
    # already enrolled: unchanged
    workflows.enroll_student(store, "2", "4")
    assert store.get(EntityKind.CLASS, "2").enrolled_students == ("2", "4")
    assert workflows.enroll_student(store, "missing", "4") is None


def test_record_grade_takes_subject_from_class(store):
    g = workflows.record_grade(store, "1", "1", 45, max_score=50, grade_type="exam", subject="Art")
    assert g.subject == "Mathematics"
    assert g.type == "exam"
    assert store.grades[-1] == g
    orphan = workflows.record_grade(store, "1", "404", 10, subject="Art", day="2024-03-01")
    assert orphan.subject == "Art"
    assert orphan.date == "2024-03-01"


def test_ask_and_answer_question(store):
    student = store.get(EntityKind.STUDENT, "3")
    q = workflows.ask_question(store, student, "5", "When is the test?")
    assert q.teacher_id == "3"
    assert q.status == "pending"
    answered = workflows.answer_query(store, q.id, "Next Tuesday")
    assert answered.status == "answered"
    assert store.get(EntityKind.QUERY, q.id).response == "Next Tuesday"
    assert workflows.ask_question(store, student, "404", "?") is None
    assert workflows.answer_query(store, "404", "no") is None


def test_message_student(store):
    teacher = store.get(EntityKind.TEACHER, "1")
    q = workflows.message_student(store, teacher, "5", "Please see me after class")
    assert q.is_from_teacher
    assert q.class_id == "1"
    assert workflows.message_student(store, teacher, "3", "hi") is None
    assert workflows.message_student(store, teacher, "404", "hi") is None


def test_new_ids_are_unique():
    produced = [new_id() for _ in range(50)]
    assert len(set(produced)) == 50
