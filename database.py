"""
In-memory domain store.

Holds the six insertion-ordered collections and applies mutations as
whole-collection replacements. The store performs no validation, no
uniqueness checks and no cascading; those decisions belong to callers.
"""

import threading
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from app_logger import get_logger
from schemas import (
    Mutation, Record, Student, Teacher,
    AddStudent, UpdateStudent, DeleteStudent,
    AddTeacher, UpdateTeacher, DeleteTeacher,
    AddClass, UpdateClass, DeleteClass,
    AddGrade, UpdateGrade, DeleteGrade,
    AddAttendance, UpdateAttendance, DeleteAttendance,
    AddQuery, UpdateQuery, DeleteQuery,
)
import seed

logger = get_logger("database")


class EntityKind(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    CLASS = "class"
    GRADE = "grade"
    ATTENDANCE = "attendance"
    QUERY = "query"


class SchoolStore:
    """
    Process-wide state for one dashboard instance.

    Created once at application start and handed to whoever serves requests.
    Mutations are serialized with a lock so a threaded host keeps the
    single-writer-at-a-time property; reads return tuples so callers cannot
    alter a collection behind the store's back.
    """

    def __init__(self, initial: Optional[Mapping[str, Iterable[Record]]] = None) -> None:
        self._lock = threading.RLock()
        self._collections: Dict[EntityKind, Tuple[Any, ...]] = {}
        self.reset(initial)

    @classmethod
    def seeded(cls) -> "SchoolStore":
        return cls(seed.dataset())

    def reset(self, initial: Optional[Mapping[str, Iterable[Record]]] = None) -> None:
        initial = initial or {}
        with self._lock:
            self._collections = {
                kind: tuple(initial.get(kind.value, ())) for kind in EntityKind
            }
        logger.debug("Store reset: %s", self.counts())

    # -------------------- Mutations -------------------- #

    def add(self, kind: EntityKind, record: Record) -> bool:
        with self._lock:
            self._collections[kind] = self._collections[kind] + (record,)
        logger.debug("Added %s id=%s", kind.value, record.id)
        return True

    def update(self, kind: EntityKind, record: Record) -> bool:
        """Replace the element whose id equals ``record.id``; no-op if absent."""
        with self._lock:
            current = self._collections[kind]
            if not any(r.id == record.id for r in current):
                logger.debug("Update of %s id=%s ignored: not found", kind.value, record.id)
                return False
            self._collections[kind] = tuple(record if r.id == record.id else r for r in current)
        logger.debug("Updated %s id=%s", kind.value, record.id)
        return True

    def delete(self, kind: EntityKind, record_id: str) -> bool:
        with self._lock:
            current = self._collections[kind]
            remaining = tuple(r for r in current if r.id != record_id)
            if len(remaining) == len(current):
                logger.debug("Delete of %s id=%s ignored: not found", kind.value, record_id)
                return False
            self._collections[kind] = remaining
        logger.debug("Deleted %s id=%s", kind.value, record_id)
        return True

    def dispatch(self, mutation: Mutation) -> bool:
        """Apply one tagged mutation. Returns False when it was a no-op."""
        match mutation:
            case AddStudent(payload=record):
                return self.add(EntityKind.STUDENT, record)
            case UpdateStudent(payload=record):
                return self.update(EntityKind.STUDENT, record)
            case DeleteStudent(payload=record_id):
                return self.delete(EntityKind.STUDENT, record_id)
            case AddTeacher(payload=record):
                return self.add(EntityKind.TEACHER, record)
            case UpdateTeacher(payload=record):
                return self.update(EntityKind.TEACHER, record)
            case DeleteTeacher(payload=record_id):
                return self.delete(EntityKind.TEACHER, record_id)
            case AddClass(payload=record):
                return self.add(EntityKind.CLASS, record)
            case UpdateClass(payload=record):
                return self.update(EntityKind.CLASS, record)
            case DeleteClass(payload=record_id):
                return self.delete(EntityKind.CLASS, record_id)
            case AddGrade(payload=record):
                return self.add(EntityKind.GRADE, record)
            case UpdateGrade(payload=record):
                return self.update(EntityKind.GRADE, record)
            case DeleteGrade(payload=record_id):
                return self.delete(EntityKind.GRADE, record_id)
            case AddAttendance(payload=record):
                return self.add(EntityKind.ATTENDANCE, record)
            case UpdateAttendance(payload=record):
                return self.update(EntityKind.ATTENDANCE, record)
            case DeleteAttendance(payload=record_id):
                return self.delete(EntityKind.ATTENDANCE, record_id)
            case AddQuery(payload=record):
                return self.add(EntityKind.QUERY, record)
            case UpdateQuery(payload=record):
                return self.update(EntityKind.QUERY, record)
            case DeleteQuery(payload=record_id):
                return self.delete(EntityKind.QUERY, record_id)
            case _:
                raise TypeError(f"Unsupported mutation: {type(mutation).__name__}")

    # -------------------- Reads -------------------- #

    def all(self, kind: EntityKind) -> Tuple[Any, ...]:
        with self._lock:
            return self._collections[kind]

    def snapshot(self) -> Dict[EntityKind, Tuple[Any, ...]]:
        with self._lock:
            return dict(self._collections)

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return {kind.value: len(rows) for kind, rows in self._collections.items()}

    def get(self, kind: EntityKind, record_id: str) -> Optional[Any]:
        return next((r for r in self.all(kind) if r.id == record_id), None)

    def find_student_by_email(self, email: Optional[str]) -> Optional[Student]:
        if not email:
            return None
        return next((s for s in self.all(EntityKind.STUDENT) if s.email == email), None)

    def find_teacher_by_email(self, email: Optional[str]) -> Optional[Teacher]:
        if not email:
            return None
        return next((t for t in self.all(EntityKind.TEACHER) if t.email == email), None)

    @property
    def students(self):
        return self.all(EntityKind.STUDENT)

    @property
    def teachers(self):
        return self.all(EntityKind.TEACHER)

    @property
    def classes(self):
        return self.all(EntityKind.CLASS)

    @property
    def grades(self):
        return self.all(EntityKind.GRADE)

    @property
    def attendance(self):
        return self.all(EntityKind.ATTENDANCE)

    @property
    def queries(self):
        return self.all(EntityKind.QUERY)
