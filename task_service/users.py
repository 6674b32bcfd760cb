"""Identity lookup used by the auth dependency.

Two directories are provided: a fixed in-memory one for local development
and an HTTP one that asks a user service for ``/users/{id}``.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Protocol

import httpx

from .models import User


class UserDirectory(Protocol):
    def resolve(self, user_id: str) -> Optional[User]:
        ...


DEV_USERS = [
    User(
        id="user-1",
        name="Alice Johnson",
        email="alice@example.com",
        createdAt=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        updatedAt=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
    ),
    User(
        id="user-2",
        name="Bob Smith",
        email="bob@example.com",
        createdAt=datetime(2024, 2, 20, 14, 30, tzinfo=timezone.utc),
        updatedAt=datetime(2024, 2, 20, 14, 30, tzinfo=timezone.utc),
    ),
    User(
        id="user-3",
        name="Carol Williams",
        email="carol@example.com",
        createdAt=datetime(2024, 3, 10, 9, 15, tzinfo=timezone.utc),
        updatedAt=datetime(2024, 3, 10, 9, 15, tzinfo=timezone.utc),
    ),
]


class InMemoryUserDirectory:
    def __init__(self, users: Iterable[User] = DEV_USERS) -> None:
        self._users: Dict[str, User] = {u.id: u for u in users}

    def resolve(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)


class HttpUserDirectory:
    """Looks users up in a remote user service: 200 is a user, 404 is unknown."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._log = logger or logging.getLogger(__name__)

    def resolve(self, user_id: str) -> Optional[User]:
        response = self._client.get(f"{self._base}/users/{user_id}")
        self._log.debug("User lookup id=%s status=%d", user_id, response.status_code)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return User.model_validate(response.json())

    def close(self) -> None:
        self._client.close()
