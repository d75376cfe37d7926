"""
Domain Schemas for the School Administration Dashboard

Each entity model below maps to one collection of the in-memory store
(see database.EntityKind). Records are frozen: a change is always a new
record handed to an UPDATE_* mutation, never an in-place edit.
"""

import threading
import time

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Optional, Literal, Tuple, Union

Role = Literal["admin", "teacher", "student"]
GradeType = Literal["quiz", "exam", "assignment"]
AttendanceStatus = Literal["present", "absent", "late"]
QueryStatus = Literal["pending", "answered"]

_id_lock = threading.Lock()
_last_id = 0


def new_id() -> str:
    """Millisecond timestamp id, bumped when two ids land in the same millisecond."""
    global _last_id
    with _id_lock:
        _last_id = max(time.time_ns() // 1_000_000, _last_id + 1)
        return str(_last_id)


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)


# Core identities
class Student(Record):
    name: str
    email: str
    phone: str = ""
    # One of "9".."12" by convention; the store accepts whatever it is given.
    grade: str = ""
    class_name: str = Field("", description="Homeroom/primary class label")
    avatar: str = ""
    date_of_birth: str = ""
    address: str = ""
    parent_name: str = ""
    parent_phone: str = ""
    enrollment_date: str = ""


class Teacher(Record):
    name: str
    email: str
    phone: str = ""
    subject: str = ""
    experience: int = Field(0, description="Years of teaching experience")
    avatar: str = ""
    qualification: str = ""
    classes: Tuple[str, ...] = Field((), description="Informational list of class ids")
    salary: float = 0


# Academic structure
class Classroom(Record):
    name: str
    grade: str = ""
    subject: str = ""
    teacher_id: str = Field("", description="Owning teacher id")
    schedule: str = ""
    room: str = ""
    capacity: int = 0
    enrolled_students: Tuple[str, ...] = Field((), description="Enrolled student ids")


# Performance and attendance
class Grade(Record):
    student_id: str
    class_id: str
    subject: str = ""
    score: float
    max_score: float = 100
    date: str = ""
    type: GradeType = "quiz"


class AttendanceRecord(Record):
    student_id: str
    class_id: str
    date: str
    status: AttendanceStatus = "present"


# Communications
class StudentQuery(Record):
    student_id: str
    teacher_id: str
    class_id: str
    message: str
    response: Optional[str] = None
    date: str = ""
    status: QueryStatus = "pending"
    is_from_teacher: bool = False


# Session identities
class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str
    role: Role
    avatar: Optional[str] = None


class Credential(SessionUser):
    password: str

    def identity(self) -> SessionUser:
        return SessionUser(**self.model_dump(exclude={"password"}))


# Mutations: one variant per (verb, entity) pair, discriminated on ``type``.
class AddStudent(BaseModel):
    type: Literal["ADD_STUDENT"] = "ADD_STUDENT"
    payload: Student


class UpdateStudent(BaseModel):
    type: Literal["UPDATE_STUDENT"] = "UPDATE_STUDENT"
    payload: Student


class DeleteStudent(BaseModel):
    type: Literal["DELETE_STUDENT"] = "DELETE_STUDENT"
    payload: str


class AddTeacher(BaseModel):
    type: Literal["ADD_TEACHER"] = "ADD_TEACHER"
    payload: Teacher


class UpdateTeacher(BaseModel):
    type: Literal["UPDATE_TEACHER"] = "UPDATE_TEACHER"
    payload: Teacher


class DeleteTeacher(BaseModel):
    type: Literal["DELETE_TEACHER"] = "DELETE_TEACHER"
    payload: str


class AddClass(BaseModel):
    type: Literal["ADD_CLASS"] = "ADD_CLASS"
    payload: Classroom


class UpdateClass(BaseModel):
    type: Literal["UPDATE_CLASS"] = "UPDATE_CLASS"
    payload: Classroom


class DeleteClass(BaseModel):
    type: Literal["DELETE_CLASS"] = "DELETE_CLASS"
    payload: str


class AddGrade(BaseModel):
    type: Literal["ADD_GRADE"] = "ADD_GRADE"
    payload: Grade


class UpdateGrade(BaseModel):
    type: Literal["UPDATE_GRADE"] = "UPDATE_GRADE"
    payload: Grade


class DeleteGrade(BaseModel):
    type: Literal["DELETE_GRADE"] = "DELETE_GRADE"
    payload: str


class AddAttendance(BaseModel):
    type: Literal["ADD_ATTENDANCE"] = "ADD_ATTENDANCE"
    payload: AttendanceRecord


class UpdateAttendance(BaseModel):
    type: Literal["UPDATE_ATTENDANCE"] = "UPDATE_ATTENDANCE"
    payload: AttendanceRecord


class DeleteAttendance(BaseModel):
    type: Literal["DELETE_ATTENDANCE"] = "DELETE_ATTENDANCE"
    payload: str


class AddQuery(BaseModel):
    type: Literal["ADD_QUERY"] = "ADD_QUERY"
    payload: StudentQuery


class UpdateQuery(BaseModel):
    type: Literal["UPDATE_QUERY"] = "UPDATE_QUERY"
    payload: StudentQuery


class DeleteQuery(BaseModel):
    type: Literal["DELETE_QUERY"] = "DELETE_QUERY"
    payload: str


Mutation = Annotated[
    Union[
        AddStudent, UpdateStudent, DeleteStudent,
        AddTeacher, UpdateTeacher, DeleteTeacher,
        AddClass, UpdateClass, DeleteClass,
        AddGrade, UpdateGrade, DeleteGrade,
        AddAttendance, UpdateAttendance, DeleteAttendance,
        AddQuery, UpdateQuery, DeleteQuery,
    ],
    Field(discriminator="type"),
]
