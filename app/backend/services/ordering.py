# app/backend/services/ordering.py
"""
Urgency ordering for task lists.

Rank 1 overdue, 2 due today, 3 due later, 4 undated (all incomplete),
5 completed. Inside a rank: due date ascending with undated last, then
newest first.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol

OVERDUE = 1
DUE_TODAY = 2
UPCOMING = 3
UNDATED = 4
COMPLETED = 5


class Orderable(Protocol):
    completed: bool
    due_date: Optional[date]
    created_at: datetime


def urgency_rank(task: Orderable, today: date) -> int:
    if task.completed:
        return COMPLETED
    if task.due_date is None:
        return UNDATED
    if task.due_date < today:
        return OVERDUE
    if task.due_date == today:
        return DUE_TODAY
    return UPCOMING


def sort_key(task: Orderable, today: date) -> tuple:
    due = task.due_date
    return (
        urgency_rank(task, today),
        due is None,
        due or date.max,
        -task.created_at.timestamp() if task.created_at else 0.0,
    )


def order_tasks(tasks: Iterable[Orderable], today: Optional[date] = None) -> list:
    today = today or date.today()
    return sorted(tasks, key=lambda t: sort_key(t, today))
