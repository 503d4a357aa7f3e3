# app/backend/services/task_service.py
"""
Task CRUD with optional ownership scoping.

With `ownership_enforced` every operation needs a resolved identity and is
limited to that identity's rows; without it the table is shared and the owner
of a new task is whoever happened to be resolved (possibly nobody).
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from app.backend.core.errors import NoDataError, NotFound, Unauthorized, ValidationError
from app.backend.models.task import Task
from app.backend.schemas.task import TaskCreate, TaskUpdate
from app.backend.services import task_store
from app.backend.services.auth_service import Identity
from app.backend.services.ordering import order_tasks

log = logging.getLogger(__name__)

# a null due_date clears the date; for the other fields null means "not sent"
_NULLABLE_FIELDS = {"due_date"}


def _validation_error(exc: PydanticValidationError) -> ValidationError:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "body"
    if err.get("type") == "missing":
        message = f"{field} is required"
    else:
        cause = (err.get("ctx") or {}).get("error")
        message = str(cause) if cause else f"{field}: {err.get('msg')}"
    return ValidationError(message, data={"field": field})


def _present(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValidationError("Request body must be a JSON object", code="invalid_json")
    return {k: v for k, v in raw.items() if v is not None or k in _NULLABLE_FIELDS}


def validate_create(raw: Any) -> TaskCreate:
    try:
        return TaskCreate.model_validate(_present(raw))
    except PydanticValidationError as exc:
        raise _validation_error(exc)


def validate_update(raw: Any) -> Dict[str, Any]:
    """Only the recognized fields that were sent; NoDataError when none were."""
    try:
        payload = TaskUpdate.model_validate(_present(raw))
    except PydanticValidationError as exc:
        raise _validation_error(exc)
    values = payload.model_dump(include=payload.model_fields_set)
    if not values:
        raise NoDataError()
    return values


class TaskService:
    def __init__(
        self,
        db: Session,
        *,
        ownership_enforced: bool = True,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.db = db
        self.ownership_enforced = ownership_enforced
        self._today = today or date.today

    def _owner_filter(self, identity: Optional[Identity]) -> Optional[int]:
        """Owner predicate for lookups/mutations; None means unscoped."""
        if not self.ownership_enforced:
            return None
        if identity is None:
            raise Unauthorized()
        return identity.user_id

    def list_tasks(self, identity: Optional[Identity]) -> List[Task]:
        owner_id = self._owner_filter(identity)
        return order_tasks(task_store.fetch_tasks(self.db, owner_id), self._today())

    def create_task(self, identity: Optional[Identity], raw: Any) -> Task:
        self._owner_filter(identity)
        data = validate_create(raw)
        task = Task(
            user_id=identity.user_id if identity else None,
            text=data.text,
            description=data.description,
            due_date=data.due_date,
            category=data.category,
            completed=data.completed,
            created_at=datetime.now(timezone.utc),
        )
        task = task_store.insert_task(self.db, task)
        log.info("task created id=%s user_id=%s", task.id, task.user_id)
        return task

    def update_task(self, identity: Optional[Identity], task_id: int, raw: Any) -> Task:
        owner_id = self._owner_filter(identity)
        if task_store.fetch_task(self.db, task_id, owner_id) is None:
            raise NotFound()
        values = validate_update(raw)

        if task_store.update_task(self.db, task_id, owner_id, values) == 0:
            # deleted between lookup and update
            raise NotFound()
        updated = task_store.fetch_task(self.db, task_id, owner_id)
        if updated is None:
            raise NotFound()
        log.info("task updated id=%s fields=%s", task_id, sorted(values))
        return updated

    def delete_task(self, identity: Optional[Identity], task_id: int) -> int:
        owner_id = self._owner_filter(identity)
        if task_store.fetch_task(self.db, task_id, owner_id) is None:
            raise NotFound()
        if task_store.delete_task(self.db, task_id, owner_id) == 0:
            raise NotFound()
        log.info("task deleted id=%s user_id=%s", task_id, owner_id)
        return task_id
