"""
Performance and attendance aggregates, "recent N" slices and dashboard
summaries. Every aggregate over an empty set yields 0 instead of dividing
by zero.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from schemas import AttendanceRecord, Grade

T = TypeVar("T")

NO_GRADES = "No grades"


def _round_half_up(value: float, places: int = 0) -> Decimal:
    exp = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exp, rounding=ROUND_HALF_UP)


def grade_percentage(grade: Grade) -> int:
    if not grade.max_score:
        return 0
    return int(_round_half_up(grade.score / grade.max_score * 100))


def average_percentage(grades: Iterable[Grade]) -> int:
    grades = list(grades)
    if not grades:
        return 0
    total = sum(g.score / g.max_score * 100 if g.max_score else 0 for g in grades)
    return int(_round_half_up(total / len(grades)))


def gpa(grades: Iterable[Grade]) -> float:
    """4-point scale: average percentage / 25, one decimal."""
    return float(_round_half_up(average_percentage(grades) / 25, 1))


def attendance_rate(records: Iterable[AttendanceRecord]) -> int:
    records = list(records)
    if not records:
        return 0
    present = sum(1 for r in records if r.status == "present")
    return int(_round_half_up(present / len(records) * 100))


def status_counts(records: Iterable[AttendanceRecord]) -> Dict[str, int]:
    counts = {"present": 0, "absent": 0, "late": 0}
    for r in records:
        counts[r.status] = counts.get(r.status, 0) + 1
    counts["total"] = counts["present"] + counts["absent"] + counts["late"]
    return counts


def grade_summary(grades: Iterable[Grade]) -> str:
    grades = list(grades)
    if not grades:
        return NO_GRADES
    return f"{average_percentage(grades)}% avg"


def recent(items: Sequence[T], n: int) -> List[T]:
    # Last n by insertion order; deliberately not sorted by any date field.
    if n <= 0:
        return []
    return list(items[-n:])


# -------------------- Dashboards -------------------- #

def admin_dashboard(students: Sequence, teachers: Sequence, classes: Sequence,
                    grades: Sequence) -> Dict[str, Any]:
    return {
        "total_students": len(students),
        "total_teachers": len(teachers),
        "total_classes": len(classes),
        "total_grades": len(grades),
        "recent_students": recent(students, 5),
        "recent_teachers": recent(teachers, 3),
    }


def teacher_dashboard(teacher: Optional[Any], classes: Sequence, grades: Sequence) -> Dict[str, Any]:
    return {
        "name": teacher.name if teacher else None,
        "my_classes": len(classes),
        "total_students": sum(len(c.enrolled_students) for c in classes),
        "grades_recorded": len(grades),
        "recent_grades": recent(grades, 5),
        "experience": teacher.experience if teacher else 0,
    }


def student_dashboard(student: Optional[Any], classes: Sequence, grades: Sequence,
                      attendance: Sequence) -> Dict[str, Any]:
    return {
        "name": student.name if student else None,
        "enrolled_classes": len(classes),
        "average_grade": average_percentage(grades),
        "attendance_rate": attendance_rate(attendance),
        "gpa": gpa(grades),
        "current_grade": student.grade if student else "N/A",
        "recent_grades": recent(grades, 5),
    }
