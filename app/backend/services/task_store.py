# app/backend/services/task_store.py
"""
Persistence gateway for the `tasks` table.

Every statement is parameterized. `owner_id=None` means "no owner filter";
when it is set, the owner predicate is part of the lookup or mutation
statement itself.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.backend.core.errors import StoreError
from app.backend.models.task import Task

log = logging.getLogger(__name__)


def _scoped(stmt, task_id: int, owner_id: Optional[int]):
    stmt = stmt.where(Task.id == task_id)
    if owner_id is not None:
        stmt = stmt.where(Task.user_id == owner_id)
    return stmt


def fetch_tasks(db: Session, owner_id: Optional[int] = None) -> List[Task]:
    stmt = select(Task)
    if owner_id is not None:
        stmt = stmt.where(Task.user_id == owner_id)
    try:
        return list(db.exec(stmt).all())
    except SQLAlchemyError:
        log.exception("task select failed owner_id=%s", owner_id)
        raise StoreError("Could not load tasks", code="db_select_error")


def fetch_task(db: Session, task_id: int, owner_id: Optional[int] = None) -> Optional[Task]:
    try:
        return db.exec(_scoped(select(Task), task_id, owner_id)).first()
    except SQLAlchemyError:
        log.exception("task lookup failed id=%s owner_id=%s", task_id, owner_id)
        raise StoreError("Could not load task", code="db_select_error")


def insert_task(db: Session, task: Task) -> Task:
    try:
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        log.exception("task insert failed user_id=%s", task.user_id)
        raise StoreError("Could not create task", code="db_insert_error")
    return task


def update_task(db: Session, task_id: int, owner_id: Optional[int], values: Dict[str, Any]) -> int:
    """Apply `values` to one row; returns the number of matched rows."""
    stmt = _scoped(update(Task), task_id, owner_id).values(**values)
    try:
        result = db.exec(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("task update failed id=%s owner_id=%s", task_id, owner_id)
        raise StoreError("Could not update task", code="db_update_error")
    # drop identity-map copies so the read-back comes from storage
    db.expire_all()
    return result.rowcount


def delete_task(db: Session, task_id: int, owner_id: Optional[int]) -> int:
    stmt = _scoped(delete(Task), task_id, owner_id)
    try:
        result = db.exec(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("task delete failed id=%s owner_id=%s", task_id, owner_id)
        raise StoreError("Could not delete task", code="db_delete_error")
    db.expire_all()
    return result.rowcount
