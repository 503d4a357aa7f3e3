# app/backend/routers/task.py
import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Path, Request, status
from sqlmodel import Session

from app.backend.core.config import Settings
from app.backend.dependencies.auth import app_settings, get_current_identity
from app.backend.schemas.task import TaskDeleted, TaskRead
from app.backend.services.auth_service import Identity
from app.backend.services.task_service import TaskService
from app.db.session import get_session

API_NAMESPACE = "/tasks/v1"
# ids are BIGINT-sized; anything larger cannot name a stored task
MAX_TASK_ID = 2**63 - 1

router = APIRouter(prefix=API_NAMESPACE, tags=["Tasks"])


async def json_body(request: Request) -> Any:
    """
    Decoded JSON body, or None when it is not JSON. Shape checks happen in
    the service so that authorization is decided first.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return None


def get_task_service(
    db: Session = Depends(get_session),
    settings: Settings = Depends(app_settings),
) -> TaskService:
    return TaskService(db, ownership_enforced=settings.ownership_enforced)


@router.get("/tasks", response_model=list[TaskRead])
def get_tasks(
    service: TaskService = Depends(get_task_service),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return service.list_tasks(identity)


@router.post("/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    body: Any = Depends(json_body),
    service: TaskService = Depends(get_task_service),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return service.create_task(identity, body)


@router.put("/tasks/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int = Path(ge=1, le=MAX_TASK_ID),
    body: Any = Depends(json_body),
    service: TaskService = Depends(get_task_service),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return service.update_task(identity, task_id, body)


@router.delete("/tasks/{task_id}", response_model=TaskDeleted)
def delete_task(
    task_id: int = Path(ge=1, le=MAX_TASK_ID),
    service: TaskService = Depends(get_task_service),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return TaskDeleted(id=service.delete_task(identity, task_id))
