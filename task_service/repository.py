import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import redis

from .models import Task

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


def owner_index_key(user_id: str) -> str:
    return f"user:{{{user_id}}}:tasks"


class TaskRepository:
    """
    Redis-backed task rows.

    Layout:
    - task:{id}               JSON row (everything but the id)
    - user:{{userId}}:tasks   sorted set of live task ids scored by createdAt

    Soft-deleted rows stay under task:{id} but are never returned or rewritten.
    update and soft_delete are WATCH/MULTI read-modify-writes on task:{id}.
    Redis errors are logged and re-raised as-is.
    """

    def __init__(
        self,
        client: redis.Redis,
        clock: Clock = utc_now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._r = client
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)

    # ---- row helpers ----

    @staticmethod
    def _load(task_id: str, raw: str) -> Task:
        return Task(id=task_id, **json.loads(raw))

    @staticmethod
    def _dump(task: Task) -> str:
        return json.dumps(task.model_dump(mode="json", exclude={"id"}))

    def _get_row(self, task_id: str) -> Optional[Task]:
        raw = self._r.get(task_key(task_id))
        if raw is None:
            return None
        return self._load(task_id, raw)

    # ---- reads ----

    def find_by_id(self, task_id: str) -> Optional[Task]:
        self._log.debug("Querying task id=%s", task_id)
        try:
            task = self._get_row(task_id)
        except redis.RedisError as exc:
            self._log.error("Store error in find_by_id id=%s error=%s", task_id, exc)
            raise

        if task is None:
            self._log.debug("Task not found id=%s", task_id)
            return None
        if task.is_deleted:
            self._log.debug("Task is soft deleted id=%s", task_id)
            return None
        self._log.debug("Task found id=%s", task_id)
        return task

    def find_all_by_owner(self, user_id: str) -> List[Task]:
        self._log.debug("Querying tasks for owner user=%s", user_id)
        try:
            ids = self._r.zrevrange(owner_index_key(user_id), 0, -1)
            raws = self._r.mget([task_key(task_id) for task_id in ids]) if ids else []
        except redis.RedisError as exc:
            self._log.error("Store error in find_all_by_owner user=%s error=%s", user_id, exc)
            raise

        tasks = []
        for task_id, raw in zip(ids, raws):
            if raw is None:
                continue
            task = self._load(task_id, raw)
            if task.is_deleted or task.userId != user_id:
                continue
            tasks.append(task)
        self._log.debug("Owner query completed user=%s count=%d", user_id, len(tasks))
        return tasks

    # ---- writes ----

    def create(
        self,
        owner_id: str,
        title: str,
        description: str,
        status: Optional[str] = None,
    ) -> Task:
        self._log.info("Creating task user=%s title=%r", owner_id, title)
        now = self._clock()
        task = Task(
            id=str(uuid.uuid4()),
            userId=owner_id,
            title=title,
            description=description,
            status=status or "TODO",
            createdAt=now,
            updatedAt=now,
        )
        try:
            with self._r.pipeline(transaction=True) as p:
                p.set(task_key(task.id), self._dump(task))
                p.zadd(owner_index_key(owner_id), {task.id: now.timestamp()})
                p.execute()
        except redis.RedisError as exc:
            self._log.error("Store error in create user=%s error=%s", owner_id, exc)
            raise

        self._log.info("Task created id=%s user=%s", task.id, owner_id)
        return task

    def _live_row(self, pipe, task_id: str) -> Task:
        raw = pipe.get(task_key(task_id))
        if raw is None:
            raise LookupError(f"Task {task_id} does not exist in store")
        current = self._load(task_id, raw)
        if current.is_deleted:
            raise LookupError(f"Task {task_id} is soft deleted")
        return current

    def update(self, task_id: str, changes: Dict[str, Any]) -> Task:
        self._log.info("Updating task id=%s fields=%s", task_id, sorted(changes))

        # WATCH task:{id}; a concurrent soft_delete aborts and re-runs this
        def apply(pipe) -> Task:
            current = self._live_row(pipe, task_id)
            updated = current.model_copy(update={**changes, "updatedAt": self._clock()})
            pipe.multi()
            pipe.set(task_key(task_id), self._dump(updated))
            return updated

        try:
            updated = self._r.transaction(apply, task_key(task_id), value_from_callable=True)
        except (redis.RedisError, LookupError) as exc:
            self._log.error("Store error in update id=%s error=%s", task_id, exc)
            raise

        self._log.info("Task updated id=%s", task_id)
        return updated

    def soft_delete(self, task_id: str) -> Task:
        self._log.info("Soft deleting task id=%s", task_id)

        def apply(pipe) -> Task:
            current = self._live_row(pipe, task_id)
            now = self._clock()
            deleted = current.model_copy(
                update={"status": "ARCHIVED", "deletedAt": now, "updatedAt": now}
            )
            pipe.multi()
            pipe.set(task_key(task_id), self._dump(deleted))
            pipe.zrem(owner_index_key(current.userId), task_id)
            return deleted

        try:
            deleted = self._r.transaction(apply, task_key(task_id), value_from_callable=True)
        except (redis.RedisError, LookupError) as exc:
            self._log.error("Store error in soft_delete id=%s error=%s", task_id, exc)
            raise

        self._log.info("Task soft deleted id=%s", task_id)
        return deleted
