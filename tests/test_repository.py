import json

import pytest
import redis

from task_service.repository import TaskRepository, owner_index_key, task_key

from .conftest import DeletingClock


def test_create_assigns_id_timestamps_and_default_status(repository):
    task = repository.create("user-1", "Buy milk", "2%")
    assert task.id
    assert task.userId == "user-1"
    assert task.status == "TODO"
    assert task.createdAt == task.updatedAt
    assert task.deletedAt is None


def test_create_writes_row_and_owner_index(repository, redis_client):
    task = repository.create("user-1", "t", "d", "IN_PROGRESS")
    row = json.loads(redis_client.get(task_key(task.id)))
    assert row["status"] == "IN_PROGRESS"
    assert row["userId"] == "user-1"
    assert "id" not in row
    assert redis_client.zscore(owner_index_key("user-1"), task.id) is not None


def test_find_by_id_round_trips(repository):
    created = repository.create("user-1", "t", "d")
    found = repository.find_by_id(created.id)
    assert found.model_dump() == created.model_dump()


def test_find_by_id_missing(repository):
    assert repository.find_by_id("nope") is None


def test_find_all_by_owner_newest_first_and_scoped(repository):
    first = repository.create("user-1", "first", "d")
    repository.create("user-2", "other", "d")
    second = repository.create("user-1", "second", "d")

    tasks = repository.find_all_by_owner("user-1")
    assert [t.id for t in tasks] == [second.id, first.id]


def test_find_all_by_owner_empty(repository):
    assert repository.find_all_by_owner("user-3") == []


def test_update_applies_only_given_fields(repository):
    task = repository.create("user-1", "title", "desc")
    updated = repository.update(task.id, {"status": "DONE"})
    assert updated.status == "DONE"
    assert updated.title == "title"
    assert updated.description == "desc"
    assert updated.updatedAt > task.updatedAt
    assert updated.createdAt == task.createdAt
    assert repository.find_by_id(task.id).model_dump() == updated.model_dump()


def test_update_missing_row_raises(repository):
    with pytest.raises(LookupError):
        repository.update("nope", {"title": "x"})


def test_soft_delete_hides_task(repository, redis_client):
    task = repository.create("user-1", "t", "d")
    deleted = repository.soft_delete(task.id)

    assert deleted.status == "ARCHIVED"
    assert deleted.deletedAt is not None
    assert repository.find_by_id(task.id) is None
    assert repository.find_all_by_owner("user-1") == []

    # the row itself is kept
    row = json.loads(redis_client.get(task_key(task.id)))
    assert row["status"] == "ARCHIVED"
    assert row["deletedAt"] is not None


def test_store_errors_propagate_unchanged(redis_server, redis_client):
    repo = TaskRepository(redis_client)
    redis_server.connected = False
    with pytest.raises(redis.ConnectionError):
        repo.find_by_id("anything")
    with pytest.raises(redis.ConnectionError):
        repo.create("user-1", "t", "d")


@pytest.fixture()
def deleting_clock(redis_client):
    clock = DeletingClock()
    clock.repository = TaskRepository(redis_client, clock=clock)
    return clock


def test_update_racing_delete_does_not_revive_task(deleting_clock, redis_client):
    repo = deleting_clock.repository
    task = repo.create("user-1", "old", "d")

    deleting_clock.pending = task.id
    with pytest.raises(LookupError):
        repo.update(task.id, {"title": "new", "status": "TODO"})

    assert repo.find_by_id(task.id) is None
    row = json.loads(redis_client.get(task_key(task.id)))
    assert row["title"] == "old"
    assert row["status"] == "ARCHIVED"
    assert row["deletedAt"] is not None


def test_soft_delete_racing_delete_fails(deleting_clock):
    repo = deleting_clock.repository
    task = repo.create("user-1", "t", "d")

    deleting_clock.pending = task.id
    with pytest.raises(LookupError):
        repo.soft_delete(task.id)
    assert repo.find_by_id(task.id) is None


def test_deleted_row_cannot_be_rewritten(repository):
    task = repository.create("user-1", "t", "d")
    repository.soft_delete(task.id)
    with pytest.raises(LookupError):
        repository.update(task.id, {"title": "x"})
    with pytest.raises(LookupError):
        repository.soft_delete(task.id)
