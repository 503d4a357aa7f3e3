import sqlalchemy as sa
from sqlmodel import SQLModel, Field
from datetime import date, datetime, timezone
from typing import Optional

DEFAULT_CATEGORY = "general"
CATEGORY_MAX_LENGTH = 50


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    # null only for tasks created anonymously while ownership is not enforced
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    text: str
    description: str = ""
    due_date: Optional[date] = Field(default=None, index=True)
    category: str = Field(
        default=DEFAULT_CATEGORY,
        max_length=CATEGORY_MAX_LENGTH,
        index=True,
        sa_column_kwargs={"server_default": DEFAULT_CATEGORY},
    )
    completed: bool = Field(
        default=False,
        index=True,
        sa_column_kwargs={"server_default": sa.text("false")},
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column_kwargs={"server_default": sa.func.now()},
    )
