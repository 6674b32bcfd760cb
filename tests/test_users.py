import httpx
import pytest

from task_service.users import DEV_USERS, HttpUserDirectory, InMemoryUserDirectory


def test_in_memory_directory_has_dev_users():
    users = InMemoryUserDirectory()
    assert users.resolve("user-1").name == "Alice Johnson"
    assert users.resolve("user-3").email == "carol@example.com"
    assert users.resolve("user-4") is None


def test_in_memory_directory_custom_users():
    users = InMemoryUserDirectory(DEV_USERS[:1])
    assert users.resolve("user-1") is not None
    assert users.resolve("user-2") is None


def directory(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpUserDirectory("http://users.local/", client=client)


def test_http_directory_found():
    def handler(request):
        assert request.url.path == "/users/abc"
        return httpx.Response(200, json={"id": "abc", "name": "Alice", "email": "alice@example.com"})

    user = directory(handler).resolve("abc")
    assert user.id == "abc"
    assert user.name == "Alice"


def test_http_directory_not_found():
    assert directory(lambda request: httpx.Response(404, json={"detail": "User not found"})).resolve("x") is None


def test_http_directory_error_status_raises():
    with pytest.raises(httpx.HTTPStatusError):
        directory(lambda request: httpx.Response(500)).resolve("x")
