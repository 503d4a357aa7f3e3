# app/backend/schemas/task.py
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.backend.models.task import CATEGORY_MAX_LENGTH, DEFAULT_CATEGORY
from app.backend.services.sanitize import (
    coerce_bool,
    normalize_due_date,
    sanitize_text_field,
    sanitize_textarea_field,
)


class _TaskFields(BaseModel):
    """Sanitizing validators shared by create and update payloads."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("text", mode="before", check_fields=False)
    @classmethod
    def _clean_text(cls, v: Any) -> str:
        cleaned = sanitize_text_field(v)
        if not cleaned:
            raise ValueError("text must not be empty")
        return cleaned

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def _clean_description(cls, v: Any) -> str:
        return sanitize_textarea_field(v)

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def _clean_due_date(cls, v: Any) -> Optional[date]:
        return normalize_due_date(v)

    @field_validator("category", mode="before", check_fields=False)
    @classmethod
    def _clean_category(cls, v: Any) -> str:
        cleaned = sanitize_text_field(v) or DEFAULT_CATEGORY
        if len(cleaned) > CATEGORY_MAX_LENGTH:
            raise ValueError(f"category must be at most {CATEGORY_MAX_LENGTH} characters")
        return cleaned

    @field_validator("completed", mode="before", check_fields=False)
    @classmethod
    def _clean_completed(cls, v: Any) -> bool:
        return coerce_bool(v)


class TaskCreate(_TaskFields):
    text: str
    description: str = ""
    due_date: Optional[date] = None
    category: str = DEFAULT_CATEGORY
    completed: bool = False


class TaskUpdate(_TaskFields):
    text: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    category: Optional[str] = None
    completed: Optional[bool] = None


class TaskRead(BaseModel):
    id: int
    user_id: Optional[int]
    text: str
    description: str
    due_date: Optional[date]
    category: str
    completed: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, v: Any) -> str:
        return v or ""

    @field_validator("category", mode="before")
    @classmethod
    def _category_default(cls, v: Any) -> str:
        return v or DEFAULT_CATEGORY


class TaskDeleted(BaseModel):
    deleted: bool = True
    id: int
