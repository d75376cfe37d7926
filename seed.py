"""
Seed dataset loaded into a fresh store on every process start, plus the
fixed credential registry used by the session component. Fixture data only.
"""

from typing import Dict, List

from schemas import (
    AttendanceRecord, Classroom, Credential, Grade, Student, StudentQuery, Teacher,
)

_AVATAR = "https://images.unsplash.com/photo-{}?w=150&h=150&fit=crop&crop=face"

DEMO_PASSWORD = "password123"


def credentials() -> List[Credential]:
    return [
        Credential(id="1", email="admin@school.com", password=DEMO_PASSWORD,
                   name="Admin User", role="admin", avatar=_AVATAR.format("1472099645785-5658abf4ff4e")),
        # Demo teacher/student accounts with no matching Teacher/Student record:
        # they authenticate but every role-scoped read comes back empty.
        Credential(id="2", email="teacher@school.com", password=DEMO_PASSWORD,
                   name="Sarah Johnson", role="teacher", avatar=_AVATAR.format("1494790108755-2616b612b786")),
        Credential(id="3", email="student@school.com", password=DEMO_PASSWORD,
                   name="Alex Smith", role="student", avatar=_AVATAR.format("1507003211169-0a1dd7228f2d")),
        Credential(id="4", email="sarah.johnson@school.edu", password=DEMO_PASSWORD,
                   name="Dr. Sarah Johnson", role="teacher", avatar=_AVATAR.format("1494790108755-2616b612b786")),
        Credential(id="5", email="emma.thompson@student.edu", password=DEMO_PASSWORD,
                   name="Emma Thompson", role="student", avatar=_AVATAR.format("1494790108755-2616b612b786")),
    ]


def students() -> List[Student]:
    return [
        Student(id="1", name="Emma Thompson", email="emma.thompson@student.edu", phone="(555) 123-4567",
                grade="10", class_name="Math Advanced", avatar=_AVATAR.format("1494790108755-2616b612b786"),
                date_of_birth="2008-03-15", address="123 Maple St, Springfield",
                parent_name="John Thompson", parent_phone="(555) 123-4568", enrollment_date="2023-09-01"),
        Student(id="2", name="Liam Rodriguez", email="liam.rodriguez@student.edu", phone="(555) 234-5678",
                grade="11", class_name="Physics Honors", avatar=_AVATAR.format("1507003211169-0a1dd7228f2d"),
                date_of_birth="2007-07-22", address="456 Oak Ave, Springfield",
                parent_name="Maria Rodriguez", parent_phone="(555) 234-5679", enrollment_date="2022-09-01"),
        Student(id="3", name="Sophia Chen", email="sophia.chen@student.edu", phone="(555) 345-6789",
                grade="12", class_name="Chemistry AP", avatar=_AVATAR.format("1438761681033-6461ffad8d80"),
                date_of_birth="2006-11-08", address="789 Pine Rd, Springfield",
                parent_name="David Chen", parent_phone="(555) 345-6790", enrollment_date="2021-09-01"),
        Student(id="4", name="Noah Williams", email="noah.williams@student.edu", phone="(555) 456-7890",
                grade="9", class_name="English Literature", avatar=_AVATAR.format("1472099645785-5658abf4ff4e"),
                date_of_birth="2009-01-14", address="321 Elm St, Springfield",
                parent_name="Lisa Williams", parent_phone="(555) 456-7891", enrollment_date="2024-09-01"),
        Student(id="5", name="Ava Johnson", email="ava.johnson@student.edu", phone="(555) 567-8901",
                grade="10", class_name="Biology", avatar=_AVATAR.format("1544725176-7c40e5a71c5e"),
                date_of_birth="2008-05-20", address="654 Cedar Ave, Springfield",
                parent_name="Robert Johnson", parent_phone="(555) 567-8902", enrollment_date="2023-09-01"),
    ]


def teachers() -> List[Teacher]:
    return [
        Teacher(id="1", name="Dr. Sarah Johnson", email="sarah.johnson@school.edu", phone="(555) 111-2222",
                subject="Mathematics", experience=8, avatar=_AVATAR.format("1494790108755-2616b612b786"),
                qualification="PhD in Mathematics", classes=["1", "2"], salary=65000),
        Teacher(id="2", name="Mr. Michael Brown", email="michael.brown@school.edu", phone="(555) 222-3333",
                subject="Physics", experience=12, avatar=_AVATAR.format("1507003211169-0a1dd7228f2d"),
                qualification="MS in Physics", classes=["3", "4"], salary=62000),
        Teacher(id="3", name="Ms. Emily Davis", email="emily.davis@school.edu", phone="(555) 333-4444",
                subject="Chemistry", experience=6, avatar=_AVATAR.format("1438761681033-6461ffad8d80"),
                qualification="MS in Chemistry", classes=["5"], salary=58000),
        Teacher(id="4", name="Mr. James Wilson", email="james.wilson@school.edu", phone="(555) 444-5555",
                subject="English Literature", experience=10, avatar=_AVATAR.format("1472099645785-5658abf4ff4e"),
                qualification="MA in English Literature", classes=["6", "7"], salary=60000),
        Teacher(id="5", name="Dr. Lisa Anderson", email="lisa.anderson@school.edu", phone="(555) 555-6666",
                subject="Biology", experience=15, avatar=_AVATAR.format("1544725176-7c40e5a71c5e"),
                qualification="PhD in Biology", classes=["8"], salary=68000),
    ]


def classes() -> List[Classroom]:
    return [
        Classroom(id="1", name="Math Advanced", grade="10", subject="Mathematics", teacher_id="1",
                  schedule="Mon, Wed, Fri 9:00-10:00 AM", room="Room 101", capacity=30,
                  enrolled_students=["1", "5"]),
        Classroom(id="2", name="Algebra II", grade="11", subject="Mathematics", teacher_id="1",
                  schedule="Tue, Thu 10:00-11:00 AM", room="Room 102", capacity=25,
                  enrolled_students=["2"]),
        Classroom(id="3", name="Physics Honors", grade="11", subject="Physics", teacher_id="2",
                  schedule="Mon, Wed, Fri 11:00-12:00 PM", room="Lab 201", capacity=20,
                  enrolled_students=["2"]),
        Classroom(id="4", name="General Physics", grade="10", subject="Physics", teacher_id="2",
                  schedule="Tue, Thu 1:00-2:00 PM", room="Lab 202", capacity=25,
                  enrolled_students=["1"]),
        Classroom(id="5", name="Chemistry AP", grade="12", subject="Chemistry", teacher_id="3",
                  schedule="Mon, Wed, Fri 2:00-3:00 PM", room="Lab 301", capacity=18,
                  enrolled_students=["3"]),
        Classroom(id="6", name="English Literature", grade="9", subject="English", teacher_id="4",
                  schedule="Daily 9:00-10:00 AM", room="Room 401", capacity=28,
                  enrolled_students=["4"]),
        Classroom(id="7", name="Advanced Writing", grade="12", subject="English", teacher_id="4",
                  schedule="Tue, Thu 11:00-12:00 PM", room="Room 402", capacity=22,
                  enrolled_students=["3"]),
        Classroom(id="8", name="Biology", grade="10", subject="Biology", teacher_id="5",
                  schedule="Mon, Wed, Fri 10:00-11:00 AM", room="Lab 501", capacity=24,
                  enrolled_students=["5", "1"]),
    ]


def grades() -> List[Grade]:
    return [
        Grade(id="1", student_id="1", class_id="1", subject="Mathematics", score=92, max_score=100,
              date="2024-01-15", type="exam"),
        Grade(id="2", student_id="2", class_id="3", subject="Physics", score=88, max_score=100,
              date="2024-01-20", type="quiz"),
        Grade(id="3", student_id="3", class_id="5", subject="Chemistry", score=95, max_score=100,
              date="2024-01-25", type="assignment"),
    ]


def attendance() -> List[AttendanceRecord]:
    return [
        AttendanceRecord(id="1", student_id="1", class_id="1", date="2024-01-15", status="present"),
        AttendanceRecord(id="2", student_id="2", class_id="3", date="2024-01-15", status="present"),
        AttendanceRecord(id="3", student_id="3", class_id="5", date="2024-01-15", status="late"),
        AttendanceRecord(id="4", student_id="5", class_id="1", date="2024-01-15", status="absent"),
        AttendanceRecord(id="5", student_id="4", class_id="6", date="2024-01-16", status="present"),
    ]


def queries() -> List[StudentQuery]:
    return [
        StudentQuery(id="1", student_id="1", teacher_id="1", class_id="1",
                     message="Could you go over the quadratic formula derivation again?",
                     date="2024-01-18", status="pending"),
        StudentQuery(id="2", student_id="2", teacher_id="2", class_id="3",
                     message="Is the lab report due Friday or Monday?",
                     response="Monday, before class.", date="2024-01-19", status="answered"),
    ]


def dataset() -> Dict[str, list]:
    """Fresh copies of every seed collection, keyed by entity kind value."""
    return {
        "student": students(),
        "teacher": teachers(),
        "class": classes(),
        "grade": grades(),
        "attendance": attendance(),
        "query": queries(),
    }
