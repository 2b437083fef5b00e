import json
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class StudentPayload(BaseModel):
    """Body of POST/PUT /students. Every field is optional here; the handlers decide what is required."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    student_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordChange(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    student_id: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class Student(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: str
    name: str
    email: str
    created_at: Optional[datetime] = None


class WeekPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[int] = None
    title: Optional[str] = None
    start_date: Optional[str] = None
    description: Optional[str] = None
    links: Optional[List[str]] = None


class Week(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    start_date: date
    description: str
    links: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("links", mode="before")
    @classmethod
    def decode_links(cls, v):
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return json.loads(v)
        return v


class CommentPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[int] = None
    week_id: Optional[int] = None
    author: Optional[str] = None
    text: Optional[str] = None


class Comment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    week_id: int
    author: str
    text: str
    created_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: Optional[str] = None
    password: Optional[str] = None


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
