"""Payload validation for task create/update requests.

Both functions accept the decoded JSON body as-is and either return the
typed request model or raise :class:`~task_service.errors.ValidationError`
with one issue per offending field.
"""

from typing import Any, Dict, List

import pydantic

from .errors import ValidationError
from .models import TaskCreate, TaskUpdate


def issues_from(exc) -> List[Dict[str, Any]]:
    """Flatten pydantic (or FastAPI request) validation errors into path/message/code issues."""
    return [
        {"path": list(err["loc"]), "message": err["msg"], "code": err["type"]}
        for err in exc.errors()
    ]


def validate_create(payload: Any) -> TaskCreate:
    try:
        return TaskCreate.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(issues=issues_from(exc)) from exc


def validate_update(payload: Any) -> TaskUpdate:
    try:
        return TaskUpdate.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(issues=issues_from(exc)) from exc
