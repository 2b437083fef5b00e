"""
Weekly course breakdown: weeks and the discussion comments attached to them.

Both live behind one endpoint, ``/weekly``, selected by the ``resource`` query
parameter (``weeks`` by default, or ``comments``). Weeks are identified by
their integer ``id``; comments point at a week through ``week_id``.
Failures carry their text under ``error`` rather than ``message``.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import database
import models
from database import get_db
from responses import ApiResponse, dispatch, preflight
from validation import (
    is_blank, is_valid_date, is_valid_sort_field, normalize_order, parse_date, parse_identifier,
    sanitize_input,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weekly")

RESOURCES = ("weeks", "comments")
SORT_FIELDS = ("title", "start_date", "created_at")


def _fail(error: str, status_code: int = 400) -> ApiResponse:
    return ApiResponse.fail(error=error, status_code=status_code)


def _serialize_week(week) -> dict:
    return models.Week.model_validate(week).model_dump(mode="json")


def _serialize_comment(comment) -> dict:
    return models.Comment.model_validate(comment).model_dump(mode="json")


def _find_week(db: Session, week_id: int):
    return db.query(database.Week).filter(database.Week.id == week_id).first()


# ========== Weeks ==========
def list_weeks(db: Session, search: Optional[str], sort: Optional[str], order: Optional[str]) -> ApiResponse:
    if not sort or not is_valid_sort_field(sort, SORT_FIELDS):
        sort = "start_date"
    column = getattr(database.Week, sort)

    query = db.query(database.Week)
    if search:
        term = search.lower()
        query = query.filter(or_(
            func.lower(database.Week.title).contains(term, autoescape=True),
            func.lower(database.Week.description).contains(term, autoescape=True),
        ))

    if normalize_order(order) == "desc":
        query = query.order_by(column.desc(), database.Week.id.desc())
    else:
        query = query.order_by(column.asc(), database.Week.id.asc())

    return ApiResponse.succeed(data=[_serialize_week(w) for w in query.all()])


def get_week(db: Session, raw_id) -> ApiResponse:
    if is_blank(raw_id):
        return _fail("id parameter is missing")
    week_id = parse_identifier(raw_id)
    if week_id is None:
        return _fail("id must be a positive integer")

    week = _find_week(db, week_id)
    if not week:
        return _fail("Week not found", 404)
    return ApiResponse.succeed(data=_serialize_week(week))


def create_week(db: Session, payload: models.WeekPayload) -> ApiResponse:
    if any(is_blank(v) for v in (payload.title, payload.start_date, payload.description)):
        return _fail("Missing required fields")

    if not is_valid_date(payload.start_date):
        return _fail("Invalid date format, expected YYYY-MM-DD")

    week = database.Week(
        title=sanitize_input(payload.title),
        start_date=parse_date(payload.start_date),
        description=sanitize_input(payload.description),
        links=json.dumps(payload.links or []),
    )
    db.add(week)
    db.commit()
    db.refresh(week)
    logger.info("Created week %s", week.id)
    return ApiResponse.succeed(status_code=201, data=_serialize_week(week), id=week.id)


def update_week(db: Session, payload: models.WeekPayload) -> ApiResponse:
    if payload.id is None:
        return _fail("id is required")

    week = _find_week(db, payload.id)
    if not week:
        return _fail("Week not found", 404)

    changes = {}
    if payload.title is not None:
        changes["title"] = sanitize_input(payload.title)
    if payload.start_date is not None:
        if not is_valid_date(payload.start_date):
            return _fail("Invalid date format, expected YYYY-MM-DD")
        changes["start_date"] = parse_date(payload.start_date)
    if payload.description is not None:
        changes["description"] = sanitize_input(payload.description)
    if payload.links is not None:
        changes["links"] = json.dumps(payload.links)

    if not changes:
        return _fail("No fields to update")

    for key, value in changes.items():
        setattr(week, key, value)

    db.commit()
    db.refresh(week)
    return ApiResponse.succeed(message="Week updated", data=_serialize_week(week))


def delete_week(db: Session, raw_id) -> ApiResponse:
    week_id = parse_identifier(raw_id)
    if week_id is None:
        return _fail("id is required")

    week = _find_week(db, week_id)
    if not week:
        return _fail("Week not found", 404)

    # comments and week go together or not at all
    try:
        db.query(database.Comment).filter(database.Comment.week_id == week_id).delete(synchronize_session=False)
        db.delete(week)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete week %s", week_id)
        return _fail("Failed to delete week", 500)
    return ApiResponse.succeed(message="Week and its comments deleted")


# ========== Comments ==========
def list_comments(db: Session, raw_week_id) -> ApiResponse:
    week_id = parse_identifier(raw_week_id)
    if week_id is None:
        return _fail("week_id required")

    comments = (
        db.query(database.Comment)
        .filter(database.Comment.week_id == week_id)
        .order_by(database.Comment.created_at.asc(), database.Comment.id.asc())
        .all()
    )
    return ApiResponse.succeed(data=[_serialize_comment(c) for c in comments])


def create_comment(db: Session, payload: models.CommentPayload) -> ApiResponse:
    if payload.week_id is None or is_blank(payload.author) or is_blank(payload.text):
        return _fail("Missing required fields")

    if not _find_week(db, payload.week_id):
        return _fail("Week not found", 404)

    comment = database.Comment(
        week_id=payload.week_id,
        author=sanitize_input(payload.author),
        text=sanitize_input(payload.text),
    )
    db.add(comment)
    try:
        db.commit()
    except IntegrityError:
        # the week went away between the lookup and the insert
        db.rollback()
        return _fail("Week not found", 404)
    db.refresh(comment)
    return ApiResponse.succeed(status_code=201, data=_serialize_comment(comment), id=comment.id)


def delete_comment(db: Session, raw_id) -> ApiResponse:
    comment_id = parse_identifier(raw_id)
    if comment_id is None:
        return _fail("Missing id")

    comment = db.query(database.Comment).filter(database.Comment.id == comment_id).first()
    if not comment:
        return _fail("Comment not found", 404)

    db.delete(comment)
    db.commit()
    return ApiResponse.succeed(message="Comment deleted")


# ========== Endpoint ==========
def _invalid_resource() -> ApiResponse:
    return _fail("Invalid resource. Use 'weeks' or 'comments'.")


def _method_not_allowed() -> ApiResponse:
    return _fail("Method Not Allowed", 405)


def _parse_body(schema, body):
    try:
        return schema.model_validate(body or {}), None
    except ValidationError:
        return None, _fail("Invalid request body").to_json_response()


@router.options("")
def weekly_preflight():
    return preflight()


@router.get("")
def read_weekly(
        resource: str = "weeks",
        item_id: Optional[str] = Query(default=None, alias="id"),
        week_id: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        db: Session = Depends(get_db)
):
    if resource == "weeks":
        if item_id:
            return dispatch(db, get_week, item_id, error_field="error")
        return dispatch(db, list_weeks, search, sort, order, error_field="error")
    if resource == "comments":
        return dispatch(db, list_comments, week_id, error_field="error")
    return _invalid_resource().to_json_response()


@router.post("")
def create_weekly(resource: str = "weeks", body: Optional[dict] = None, db: Session = Depends(get_db)):
    if resource not in RESOURCES:
        return _invalid_resource().to_json_response()

    schema, handler = (models.WeekPayload, create_week) if resource == "weeks" \
        else (models.CommentPayload, create_comment)
    payload, error = _parse_body(schema, body)
    if error is not None:
        return error
    return dispatch(db, handler, payload, error_field="error")


@router.put("")
def update_weekly(resource: str = "weeks", body: Optional[dict] = None, db: Session = Depends(get_db)):
    if resource == "comments":
        return _method_not_allowed().to_json_response()
    if resource != "weeks":
        return _invalid_resource().to_json_response()

    payload, error = _parse_body(models.WeekPayload, body)
    if error is not None:
        return error
    return dispatch(db, update_week, payload, error_field="error")


@router.delete("")
def delete_weekly(
        resource: str = "weeks",
        item_id: Optional[str] = Query(default=None, alias="id"),
        body: Optional[dict] = None,
        db: Session = Depends(get_db)
):
    if resource not in RESOURCES:
        return _invalid_resource().to_json_response()

    target = item_id if item_id is not None else (body or {}).get("id")
    handler = delete_week if resource == "weeks" else delete_comment
    return dispatch(db, handler, target, error_field="error")
