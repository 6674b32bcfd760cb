"""Caller identity for task routes.

The caller's id is taken from the ``X-User-Id`` header and only checked for
existence in the configured :class:`~task_service.users.UserDirectory`.
Nothing is signed or verified; this stands in for real authentication
during development.
"""

import logging

from fastapi import Request

from .errors import AuthHeaderMissing, AuthIdentityUnknown

USER_HEADER = "X-User-Id"

logger = logging.getLogger(__name__)


def require_user(request: Request) -> str:
    user_id = request.headers.get(USER_HEADER)
    if not user_id:
        logger.warning("Request without identity header path=%s", request.url.path)
        raise AuthHeaderMissing(f"Missing {USER_HEADER} header")

    if request.app.state.users.resolve(user_id) is None:
        logger.warning("Unknown user id=%s path=%s", user_id, request.url.path)
        raise AuthIdentityUnknown("Invalid user")

    request.state.user_id = user_id
    return user_id
