import logging
from typing import List, Optional

from .errors import Forbidden, NotFound
from .models import Task, TaskCreate, TaskUpdate
from .repository import TaskRepository


class TaskService:
    """
    Ownership rules on top of the repository.

    Every operation on an existing task id checks, in order:
    the task exists, it is not soft-deleted, it belongs to the requester.
    Missing and soft-deleted tasks fail identically so callers cannot tell
    whether another user's task ever existed.
    """

    def __init__(self, repository: TaskRepository, logger: Optional[logging.Logger] = None) -> None:
        self._repo = repository
        self._log = logger or logging.getLogger(__name__)

    def _authorized_task(self, task_id: str, user_id: str, action: str) -> Task:
        task = self._repo.find_by_id(task_id)

        if task is None:
            self._log.warning("Task not found id=%s user=%s action=%s", task_id, user_id, action)
            raise NotFound(f"Task {task_id} not found")

        if task.is_deleted:
            self._log.warning("Task is soft deleted id=%s user=%s action=%s", task_id, user_id, action)
            raise NotFound(f"Task {task_id} not found")

        if task.userId != user_id:
            self._log.warning(
                "Unauthorized %s attempt id=%s user=%s owner=%s", action, task_id, user_id, task.userId
            )
            raise Forbidden(f"You do not have permission to {action} this task")

        return task

    def list_tasks(self, user_id: str) -> List[Task]:
        self._log.debug("Fetching tasks user=%s", user_id)
        tasks = self._repo.find_all_by_owner(user_id)
        self._log.debug("Tasks fetched user=%s count=%d", user_id, len(tasks))
        return tasks

    def create_task(self, user_id: str, data: TaskCreate) -> Task:
        self._log.info("Creating new task user=%s title=%r", user_id, data.title)
        task = self._repo.create(user_id, data.title, data.description, data.status)
        self._log.info("Task created id=%s user=%s status=%s", task.id, user_id, task.status)
        return task

    def get_task(self, task_id: str, user_id: str) -> Task:
        self._log.debug("Fetching task id=%s user=%s", task_id, user_id)
        return self._authorized_task(task_id, user_id, "access")

    def update_task(self, task_id: str, user_id: str, data: TaskUpdate) -> Task:
        changes = data.changes()
        self._log.debug("Updating task id=%s user=%s fields=%s", task_id, user_id, sorted(changes))
        self._authorized_task(task_id, user_id, "modify")

        # deletedAt is only ever written by delete_task, even for status=ARCHIVED
        try:
            task = self._repo.update(task_id, changes)
        except LookupError:
            self._log.warning("Task deleted during update id=%s user=%s", task_id, user_id)
            raise NotFound(f"Task {task_id} not found")
        self._log.info("Task updated id=%s user=%s status=%s", task_id, user_id, task.status)
        return task

    def delete_task(self, task_id: str, user_id: str) -> None:
        self._log.debug("Deleting task id=%s user=%s", task_id, user_id)
        self._authorized_task(task_id, user_id, "delete")
        try:
            self._repo.soft_delete(task_id)
        except LookupError:
            self._log.warning("Task deleted concurrently id=%s user=%s", task_id, user_id)
            raise NotFound(f"Task {task_id} not found")
        self._log.info("Task soft deleted id=%s user=%s", task_id, user_id)
