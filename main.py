import os
import time
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import access
import analytics
import workflows
from app_logger import get_logger
from database import EntityKind, SchoolStore
from schemas import (
    Student, Teacher, Classroom, Grade, AttendanceRecord, StudentQuery,
    AttendanceStatus, GradeType, Mutation, SessionUser,
    AddStudent, UpdateStudent, DeleteStudent,
    AddTeacher, UpdateTeacher, DeleteTeacher,
    AddClass, UpdateClass, DeleteClass,
    UpdateGrade,
)
from session import Session

logger = get_logger("api")


# -------------------- Payloads -------------------- #

class LoginPayload(BaseModel):
    email: str
    password: str


class GradePayload(BaseModel):
    student_id: str
    class_id: str
    score: float
    max_score: float = 100
    type: GradeType = "quiz"
    subject: str = ""
    date: Optional[str] = None


class AttendancePayload(BaseModel):
    class_id: str
    date: str
    statuses: Dict[str, AttendanceStatus]


class EnrollPayload(BaseModel):
    student_id: str


class AnswerPayload(BaseModel):
    response: str


class MessagePayload(BaseModel):
    student_id: str
    message: str


class QuestionPayload(BaseModel):
    class_id: str
    message: str


class DispatchPayload(BaseModel):
    mutation: Mutation


# -------------------- Context & Security -------------------- #

def get_store(request: Request) -> SchoolStore:
    return request.app.state.store


def get_session(request: Request) -> Session:
    return request.app.state.session


def get_current_user(session: Session = Depends(get_session)) -> Optional[SessionUser]:
    """Current identity, or None. Does not enforce auth by itself."""
    return session.current_user


def require_user(user: Optional[SessionUser] = Depends(get_current_user)) -> SessionUser:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_roles(*roles: str):
    def _dep(user: SessionUser = Depends(require_user)):
        if roles and user.role not in roles:
            raise HTTPException(status_code=403, detail="Forbidden for role")
        return user
    return _dep


def require_write(kind: EntityKind):
    def _dep(user: SessionUser = Depends(require_user)):
        if not access.can_write(user, kind):
            raise HTTPException(status_code=403, detail="Forbidden for role")
        return user
    return _dep


def ensure_owns_class(store: SchoolStore, user: SessionUser, class_id: str) -> None:
    if store.get(EntityKind.CLASS, class_id) is None:
        raise HTTPException(status_code=404, detail="Class not found")
    if not access.owns_class(store, user, class_id):
        raise HTTPException(status_code=403, detail="Class is not yours")


def owned_by_caller(store: SchoolStore, user: SessionUser, cls: Classroom) -> Classroom:
    """Pin a class written by a teacher to that teacher; admins assign freely."""
    if user.role == "admin":
        return cls
    teacher = access.resolve_teacher(store, user)
    if teacher is None:
        raise HTTPException(status_code=403, detail="No teacher record for this account")
    return cls.model_copy(update={"teacher_id": teacher.id})


def applied(result: bool) -> Dict[str, bool]:
    return {"applied": result}


# -------------------- App factory -------------------- #

def create_app(seeded: Optional[bool] = None) -> FastAPI:
    if seeded is None:
        seeded = os.getenv("SCHOOL_SEED", "1") != "0"

    app = FastAPI(title="School Administration Dashboard API", version="1.0.0")
    app.state.store = SchoolStore.seeded() if seeded else SchoolStore()
    # One session for the whole app: every HTTP client acts as whoever logged in last.
    app.state.session = Session()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def audit_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        user = request.app.state.session.current_user
        logger.info(
            "%s %s -> %s role=%s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            user.role if user else None,
            (time.perf_counter() - start) * 1000,
        )
        return response

    register_routes(app)
    logger.info("Application ready (seeded=%s): %s", seeded, app.state.store.counts())
    return app


def register_routes(app: FastAPI) -> None:

    # -------------------- Meta endpoints -------------------- #

    @app.get("/")
    def read_root():
        return {"message": "School Administration Dashboard backend is running"}

    @app.get("/schema")
    def get_schema():
        models = [Student, Teacher, Classroom, Grade, AttendanceRecord, StudentQuery, SessionUser]
        return {m.__name__: m.model_json_schema() for m in models}

    @app.get("/test")
    def test_store(store: SchoolStore = Depends(get_store), session: Session = Depends(get_session)):
        return {
            "backend": "✅ Running",
            "store": "✅ In-memory",
            "authenticated": session.is_authenticated(),
            "collections": store.counts(),
        }

    # -------------------- Auth endpoints -------------------- #

    @app.post("/auth/login", response_model=SessionUser)
    def login(payload: LoginPayload, session: Session = Depends(get_session)):
        if not session.login(payload.email, payload.password):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        return session.current_user

    @app.post("/auth/logout")
    def logout(session: Session = Depends(get_session)):
        session.logout()
        return {"status": "logged out"}

    @app.get("/auth/me", response_model=SessionUser)
    def me(user: SessionUser = Depends(require_user)):
        return user

    # -------------------- Raw mutations -------------------- #

    @app.post("/dispatch")
    def dispatch(payload: DispatchPayload, store: SchoolStore = Depends(get_store),
                 user=Depends(require_roles("admin"))):
        return applied(store.dispatch(payload.mutation))

    # -------------------- Role-scoped reads -------------------- #

    @app.get("/students", response_model=List[Student])
    def list_students(search: Optional[str] = None, grade: Optional[str] = None,
                      store: SchoolStore = Depends(get_store), user=Depends(require_user)):
        rows = access.visible(store, EntityKind.STUDENT, user)
        return access.search_students(rows, search, grade)

    @app.get("/students/grade-levels")
    def list_grade_levels(store: SchoolStore = Depends(get_store), user=Depends(require_user)):
        return access.grade_levels(access.visible(store, EntityKind.STUDENT, user))

    @app.get("/teachers", response_model=List[Teacher])
    def list_teachers(search: Optional[str] = None, store: SchoolStore = Depends(get_store),
                      user=Depends(require_user)):
        return access.search_teachers(access.visible(store, EntityKind.TEACHER, user), search)

    @app.get("/classes")
    def list_classes(search: Optional[str] = None, store: SchoolStore = Depends(get_store),
                     user=Depends(require_user)):
        rows = access.search_classes(access.visible(store, EntityKind.CLASS, user), search)
        return [access.join_class(store, c) for c in rows]

    @app.get("/grades")
    def list_grades(search: Optional[str] = None, grade_level: Optional[str] = None,
                    store: SchoolStore = Depends(get_store), user=Depends(require_user)):
        rows = access.search_grades(store, access.visible(store, EntityKind.GRADE, user), search, grade_level)
        return [access.join_grade(store, g) for g in rows]

    @app.get("/attendance")
    def list_attendance(search: Optional[str] = None, date: Optional[str] = None,
                        store: SchoolStore = Depends(get_store), user=Depends(require_user)):
        rows = access.search_attendance(store, access.visible(store, EntityKind.ATTENDANCE, user), search, date)
        return [access.join_attendance(store, a) for a in rows]

    @app.get("/attendance/dates")
    def list_attendance_dates(store: SchoolStore = Depends(get_store), user=Depends(require_user)):
        return access.attendance_dates(access.visible(store, EntityKind.ATTENDANCE, user))

    @app.get("/queries")
    def list_queries(store: SchoolStore = Depends(get_store), user=Depends(require_user)):
        return [access.join_query(store, q) for q in access.visible(store, EntityKind.QUERY, user)]

    # -------------------- Admin endpoints -------------------- #

    @app.post("/admin/students", response_model=Student)
    def add_student(payload: Student, store: SchoolStore = Depends(get_store),
                    user=Depends(require_write(EntityKind.STUDENT))):
        store.dispatch(AddStudent(payload=payload))
        return payload

    @app.put("/admin/students/{student_id}")
    def update_student(student_id: str, payload: Student, store: SchoolStore = Depends(get_store),
                       user=Depends(require_write(EntityKind.STUDENT))):
        record = payload.model_copy(update={"id": student_id})
        return applied(store.dispatch(UpdateStudent(payload=record)))

    @app.delete("/admin/students/{student_id}")
    def delete_student(student_id: str, store: SchoolStore = Depends(get_store),
                       user=Depends(require_write(EntityKind.STUDENT))):
        return applied(store.dispatch(DeleteStudent(payload=student_id)))

    @app.post("/admin/teachers", response_model=Teacher)
    def add_teacher(payload: Teacher, store: SchoolStore = Depends(get_store),
                    user=Depends(require_write(EntityKind.TEACHER))):
        store.dispatch(AddTeacher(payload=payload))
        return payload

    @app.put("/admin/teachers/{teacher_id}")
    def update_teacher(teacher_id: str, payload: Teacher, store: SchoolStore = Depends(get_store),
                       user=Depends(require_write(EntityKind.TEACHER))):
        record = payload.model_copy(update={"id": teacher_id})
        return applied(store.dispatch(UpdateTeacher(payload=record)))

    @app.delete("/admin/teachers/{teacher_id}")
    def delete_teacher(teacher_id: str, store: SchoolStore = Depends(get_store),
                       user=Depends(require_write(EntityKind.TEACHER))):
        return applied(store.dispatch(DeleteTeacher(payload=teacher_id)))

    # -------------------- Class management -------------------- #

    @app.post("/classes", response_model=Classroom)
    def add_class(payload: Classroom, store: SchoolStore = Depends(get_store),
                  user=Depends(require_write(EntityKind.CLASS))):
        record = owned_by_caller(store, user, payload)
        store.dispatch(AddClass(payload=record))
        return record

    @app.put("/classes/{class_id}")
    def update_class(class_id: str, payload: Classroom, store: SchoolStore = Depends(get_store),
                     user=Depends(require_write(EntityKind.CLASS))):
        if store.get(EntityKind.CLASS, class_id) is None:
            return applied(False)
        ensure_owns_class(store, user, class_id)
        record = owned_by_caller(store, user, payload).model_copy(update={"id": class_id})
        return applied(store.dispatch(UpdateClass(payload=record)))

    @app.delete("/classes/{class_id}")
    def delete_class(class_id: str, store: SchoolStore = Depends(get_store),
                     user=Depends(require_write(EntityKind.CLASS))):
        if store.get(EntityKind.CLASS, class_id) is None:
            return applied(False)
        ensure_owns_class(store, user, class_id)
        return applied(store.dispatch(DeleteClass(payload=class_id)))

    # -------------------- Teacher endpoints -------------------- #

    @app.post("/teachers/grades", response_model=Grade)
    def add_grade(payload: GradePayload, store: SchoolStore = Depends(get_store),
                  user=Depends(require_write(EntityKind.GRADE))):
        ensure_owns_class(store, user, payload.class_id)
        return workflows.record_grade(
            store, payload.student_id, payload.class_id, payload.score,
            max_score=payload.max_score, grade_type=payload.type,
            subject=payload.subject, day=payload.date,
        )

    @app.put("/teachers/grades/{grade_id}")
    def update_grade(grade_id: str, payload: Grade, store: SchoolStore = Depends(get_store),
                     user=Depends(require_write(EntityKind.GRADE))):
        existing = store.get(EntityKind.GRADE, grade_id)
        if existing is None:
            return applied(False)
        ensure_owns_class(store, user, existing.class_id)
        ensure_owns_class(store, user, payload.class_id)
        record = payload.model_copy(update={"id": grade_id})
        return applied(store.dispatch(UpdateGrade(payload=record)))

    @app.post("/teachers/attendance", response_model=List[AttendanceRecord])
    def take_attendance(payload: AttendancePayload, store: SchoolStore = Depends(get_store),
                        user=Depends(require_write(EntityKind.ATTENDANCE))):
        ensure_owns_class(store, user, payload.class_id)
        return workflows.submit_attendance(store, payload.class_id, payload.date, dict(payload.statuses))

    @app.post("/teachers/classes/{class_id}/enroll", response_model=Classroom)
    def enroll(class_id: str, payload: EnrollPayload, store: SchoolStore = Depends(get_store),
               user=Depends(require_write(EntityKind.CLASS))):
        ensure_owns_class(store, user, class_id)
        if store.get(EntityKind.STUDENT, payload.student_id) is None:
            raise HTTPException(status_code=404, detail="Student not found")
        return workflows.enroll_student(store, class_id, payload.student_id)

    @app.get("/teachers/available-students", response_model=List[Student])
    def list_available_students(store: SchoolStore = Depends(get_store),
                                user=Depends(require_roles("teacher"))):
        return access.available_students(store, user)

    @app.post("/teachers/queries/{query_id}/answer", response_model=StudentQuery)
    def answer(query_id: str, payload: AnswerPayload, store: SchoolStore = Depends(get_store),
               user=Depends(require_roles("teacher"))):
        visible_ids = {q.id for q in access.visible(store, EntityKind.QUERY, user)}
        if query_id not in visible_ids:
            raise HTTPException(status_code=404, detail="Query not found")
        return workflows.answer_query(store, query_id, payload.response)

    @app.post("/teachers/messages", response_model=StudentQuery)
    def message(payload: MessagePayload, store: SchoolStore = Depends(get_store),
                user=Depends(require_roles("teacher"))):
        teacher = access.resolve_teacher(store, user)
        if teacher is None:
            raise HTTPException(status_code=403, detail="No teacher record for this account")
        query = workflows.message_student(store, teacher, payload.student_id, payload.message)
        if query is None:
            raise HTTPException(status_code=404, detail="Student is not in any of your classes")
        return query

    # -------------------- Student endpoints -------------------- #

    @app.post("/students/queries", response_model=StudentQuery)
    def ask(payload: QuestionPayload, store: SchoolStore = Depends(get_store),
            user=Depends(require_roles("student"))):
        student = access.resolve_student(store, user)
        if student is None:
            raise HTTPException(status_code=403, detail="No student record for this account")
        if payload.class_id not in {c.id for c in access.enrolled_classes(store, student)}:
            raise HTTPException(status_code=404, detail="Class not found")
        return workflows.ask_question(store, student, payload.class_id, payload.message)

    # -------------------- Dashboards -------------------- #

    @app.get("/dashboards/admin")
    def admin_dashboard(store: SchoolStore = Depends(get_store), user=Depends(require_roles("admin"))):
        return analytics.admin_dashboard(store.students, store.teachers, store.classes, store.grades)

    @app.get("/dashboards/teacher")
    def teacher_dashboard(store: SchoolStore = Depends(get_store), user=Depends(require_roles("teacher"))):
        teacher = access.resolve_teacher(store, user)
        grades = access.visible(store, EntityKind.GRADE, user)
        summary = analytics.teacher_dashboard(teacher, access.visible(store, EntityKind.CLASS, user), grades)
        summary["recent_grades"] = [access.join_grade(store, g) for g in summary["recent_grades"]]
        return summary

    @app.get("/dashboards/student")
    def student_dashboard(store: SchoolStore = Depends(get_store), user=Depends(require_roles("student"))):
        student = access.resolve_student(store, user)
        summary = analytics.student_dashboard(
            student,
            access.visible(store, EntityKind.CLASS, user),
            access.visible(store, EntityKind.GRADE, user),
            access.visible(store, EntityKind.ATTENDANCE, user),
        )
        summary["recent_grades"] = [access.join_grade(store, g) for g in summary["recent_grades"]]
        return summary


app = create_app()


# -------------------- Run -------------------- #

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
