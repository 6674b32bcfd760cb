import logging
from typing import Any, List, Optional

from .errors import ValidationError
from .models import TaskResponse
from .service import TaskService
from .validators import validate_create, validate_update


class TaskController:
    """Turns raw request bodies into service calls and service results into response models."""

    def __init__(self, service: TaskService, logger: Optional[logging.Logger] = None) -> None:
        self._service = service
        self._log = logger or logging.getLogger(__name__)

    def list_tasks(self, user_id: str) -> List[TaskResponse]:
        self._log.debug("Listing tasks user=%s", user_id)
        try:
            tasks = self._service.list_tasks(user_id)
        except Exception as exc:
            self._log.error("Failed to list tasks user=%s error=%s", user_id, exc)
            raise
        self._log.info("Tasks listed user=%s count=%d", user_id, len(tasks))
        return [TaskResponse.from_task(t) for t in tasks]

    def create_task(self, user_id: str, payload: Any) -> TaskResponse:
        self._log.debug("Creating task user=%s body=%r", user_id, payload)
        try:
            data = validate_create({} if payload is None else payload)
            task = self._service.create_task(user_id, data)
        except ValidationError as exc:
            self._log.warning("Validation failed on task creation user=%s issues=%s", user_id, exc.issues)
            raise
        except Exception as exc:
            self._log.error("Failed to create task user=%s error=%s", user_id, exc)
            raise
        self._log.info("Task created user=%s id=%s", user_id, task.id)
        return TaskResponse.from_task(task)

    def get_task(self, task_id: str, user_id: str) -> TaskResponse:
        self._log.debug("Getting task user=%s id=%s", user_id, task_id)
        try:
            task = self._service.get_task(task_id, user_id)
        except Exception as exc:
            self._log.error("Failed to get task user=%s id=%s error=%s", user_id, task_id, exc)
            raise
        self._log.info("Task retrieved user=%s id=%s", user_id, task_id)
        return TaskResponse.from_task(task)

    def update_task(self, task_id: str, user_id: str, payload: Any) -> TaskResponse:
        self._log.debug("Updating task user=%s id=%s body=%r", user_id, task_id, payload)
        try:
            data = validate_update({} if payload is None else payload)
        except ValidationError as exc:
            self._log.warning(
                "Validation failed on task update user=%s id=%s issues=%s", user_id, task_id, exc.issues
            )
            raise

        if not data.changes():
            self._log.warning("Update request with no fields user=%s id=%s", user_id, task_id)
            raise ValidationError("No fields to update provided")

        try:
            task = self._service.update_task(task_id, user_id, data)
        except Exception as exc:
            self._log.error("Failed to update task user=%s id=%s error=%s", user_id, task_id, exc)
            raise
        self._log.info("Task updated user=%s id=%s", user_id, task_id)
        return TaskResponse.from_task(task)

    def delete_task(self, task_id: str, user_id: str) -> None:
        self._log.debug("Deleting task user=%s id=%s", user_id, task_id)
        try:
            self._service.delete_task(task_id, user_id)
        except Exception as exc:
            self._log.error("Failed to delete task user=%s id=%s error=%s", user_id, task_id, exc)
            raise
        self._log.info("Task deleted user=%s id=%s", user_id, task_id)
