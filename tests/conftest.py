from datetime import datetime, timedelta, timezone

import fakeredis
import pytest
from fastapi.testclient import TestClient

from task_service.config import Settings
from task_service.main import create_app
from task_service.repository import TaskRepository
from task_service.service import TaskService
from task_service.users import InMemoryUserDirectory


class StepClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start=datetime(2025, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


class DeletingClock(StepClock):
    """Soft-deletes a pending task the next time the repository asks for the time."""

    def __init__(self):
        super().__init__()
        self.repository = None
        self.pending = None

    def __call__(self):
        task_id, self.pending = self.pending, None
        if task_id is not None:
            self.repository.soft_delete(task_id)
        return super().__call__()


@pytest.fixture()
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture()
def redis_client(redis_server):
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture()
def repository(redis_client):
    return TaskRepository(redis_client, clock=StepClock())


@pytest.fixture()
def service(repository):
    return TaskService(repository)


@pytest.fixture()
def app(redis_client):
    return create_app(
        settings=Settings(),
        redis_client=redis_client,
        users=InMemoryUserDirectory(),
    )


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def as_user(user_id):
    return {"X-User-Id": user_id}
