import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import auth
import database
import models
from config import settings
from database import get_db
from responses import ApiResponse, dispatch, preflight
from validation import is_blank, is_valid_email, is_valid_sort_field, normalize_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students")

SORT_FIELDS = ("name", "student_id", "email")


def _serialize(student) -> dict:
    return models.Student.model_validate(student).model_dump(mode="json")


def _find(db: Session, student_id: str):
    return db.query(database.Student).filter(database.Student.student_id == student_id).first()


# ========== Handlers ==========
def list_students(db: Session, search: Optional[str], sort: Optional[str], order: Optional[str]) -> ApiResponse:
    query = db.query(database.Student)

    if search:
        term = search.lower()
        query = query.filter(or_(
            func.lower(database.Student.name).contains(term, autoescape=True),
            func.lower(database.Student.student_id).contains(term, autoescape=True),
            func.lower(database.Student.email).contains(term, autoescape=True),
        ))

    if sort and is_valid_sort_field(sort, SORT_FIELDS):
        column = getattr(database.Student, sort)
        query = query.order_by(column.desc() if normalize_order(order) == "desc" else column.asc())
    query = query.order_by(database.Student.id)

    return ApiResponse.succeed(data=[_serialize(s) for s in query.all()])


def get_student(db: Session, student_id: str) -> ApiResponse:
    student = _find(db, student_id)
    if not student:
        return ApiResponse.fail("Student not found", status_code=404)
    return ApiResponse.succeed(data=_serialize(student))


def create_student(db: Session, payload: models.StudentPayload) -> ApiResponse:
    if any(is_blank(v) for v in (payload.student_id, payload.name, payload.email, payload.password)):
        return ApiResponse.fail("Missing required fields")

    email = payload.email.strip()
    if not is_valid_email(email):
        return ApiResponse.fail("Invalid email format")

    student = database.Student(
        student_id=payload.student_id.strip(),
        name=payload.name.strip(),
        email=email,
        password=auth.get_password_hash(payload.password),
    )
    db.add(student)
    try:
        db.commit()
    except IntegrityError:
        # unique index on student_id or email
        db.rollback()
        logger.warning("Duplicate student %s / %s", student.student_id, email)
        return ApiResponse.fail("Student ID or email already exists", status_code=409)
    db.refresh(student)
    return ApiResponse.succeed(message="Student created successfully", status_code=201, data=_serialize(student))


def update_student(db: Session, payload: models.StudentPayload) -> ApiResponse:
    if is_blank(payload.student_id):
        return ApiResponse.fail("student_id is required")

    student = _find(db, payload.student_id)
    if not student:
        return ApiResponse.fail("Student not found", status_code=404)

    changed = False
    if payload.name is not None:
        if is_blank(payload.name):
            return ApiResponse.fail("Name cannot be empty")
        student.name = payload.name.strip()
        changed = True

    if payload.email is not None:
        email = payload.email.strip()
        if not is_valid_email(email):
            db.rollback()
            return ApiResponse.fail("Invalid email format")
        student.email = email
        changed = True

    if not changed:
        return ApiResponse.fail("No fields to update")

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return ApiResponse.fail("Email already exists", status_code=409)
    db.refresh(student)
    return ApiResponse.succeed(message="Student updated successfully", data=_serialize(student))


def delete_student(db: Session, student_id: Optional[str]) -> ApiResponse:
    if is_blank(student_id):
        return ApiResponse.fail("student_id is required")

    student = _find(db, student_id)
    if not student:
        return ApiResponse.fail("Student not found", status_code=404)

    db.delete(student)
    db.commit()
    return ApiResponse.succeed(message="Student deleted successfully")


def change_password(db: Session, payload: models.PasswordChange) -> ApiResponse:
    if any(is_blank(v) for v in (payload.student_id, payload.current_password, payload.new_password)):
        return ApiResponse.fail("Missing required fields")

    if len(payload.new_password) < settings.min_password_length:
        return ApiResponse.fail(
            f"New password must be at least {settings.min_password_length} characters long"
        )

    student = _find(db, payload.student_id)
    if not student or not auth.verify_password(payload.current_password, student.password):
        return ApiResponse.fail("Unauthorized", status_code=401)

    student.password = auth.get_password_hash(payload.new_password)
    db.commit()
    return ApiResponse.succeed(message="Password updated successfully")


# ========== Endpoints ==========
@router.options("")
def students_preflight():
    return preflight()


@router.get("")
def read_students(
        search: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        student_id: Optional[str] = None,
        db: Session = Depends(get_db)
):
    if student_id:
        return dispatch(db, get_student, student_id)
    return dispatch(db, list_students, search, sort, order)


@router.post("")
def create_or_change_password(
        body: Optional[dict] = None,
        action: Optional[str] = None,
        db: Session = Depends(get_db)
):
    schema, handler = (models.PasswordChange, change_password) if action == "change_password" \
        else (models.StudentPayload, create_student)
    try:
        payload = schema.model_validate(body or {})
    except ValidationError:
        return ApiResponse.fail("Invalid request body").to_json_response()
    return dispatch(db, handler, payload)


@router.put("")
def update_student_endpoint(payload: Optional[models.StudentPayload] = None, db: Session = Depends(get_db)):
    return dispatch(db, update_student, payload or models.StudentPayload())


@router.delete("")
def delete_student_endpoint(
        student_id: Optional[str] = None,
        body: Optional[dict] = None,
        db: Session = Depends(get_db)
):
    sid = student_id or (body or {}).get("student_id")
    if sid is not None:
        sid = str(sid)
    return dispatch(db, delete_student, sid)
