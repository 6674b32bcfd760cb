import json
from typing import Any, List

from fastapi import APIRouter, Depends, Request, Response

from .auth import require_user
from .controller import TaskController
from .errors import ValidationError
from .models import TaskResponse


def get_controller(request: Request) -> TaskController:
    return request.app.state.controller


async def json_body(request: Request, user_id: str = Depends(require_user)) -> Any:
    """Decoded request body, read only once the caller is identified."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationError(
            issues=[{"path": ["body"], "message": f"Invalid JSON: {exc}", "code": "json_invalid"}]
        ) from exc


def create_task_router(prefix: str = "/api/v1") -> APIRouter:
    router = APIRouter(prefix=f"{prefix}/tasks", tags=["tasks"])

    @router.get("", response_model=List[TaskResponse])
    @router.get("/", response_model=List[TaskResponse], include_in_schema=False)
    def list_tasks(
        user_id: str = Depends(require_user),
        controller: TaskController = Depends(get_controller),
    ):
        return controller.list_tasks(user_id)

    @router.post("", status_code=201, response_model=TaskResponse)
    @router.post("/", status_code=201, response_model=TaskResponse, include_in_schema=False)
    def create_task(
        user_id: str = Depends(require_user),
        payload: Any = Depends(json_body),
        controller: TaskController = Depends(get_controller),
    ):
        return controller.create_task(user_id, payload)

    @router.get("/{task_id}", response_model=TaskResponse)
    def get_task(
        task_id: str,
        user_id: str = Depends(require_user),
        controller: TaskController = Depends(get_controller),
    ):
        return controller.get_task(task_id, user_id)

    @router.patch("/{task_id}", response_model=TaskResponse)
    def update_task(
        task_id: str,
        user_id: str = Depends(require_user),
        payload: Any = Depends(json_body),
        controller: TaskController = Depends(get_controller),
    ):
        return controller.update_task(task_id, user_id, payload)

    @router.delete("/{task_id}", status_code=204)
    def delete_task(
        task_id: str,
        user_id: str = Depends(require_user),
        controller: TaskController = Depends(get_controller),
    ):
        controller.delete_task(task_id, user_id)
        return Response(status_code=204)

    return router
