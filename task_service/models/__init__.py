from .Task import CreateStatus, Status, Task
from .TaskCreate import TaskCreate
from .TaskResponse import TaskResponse
from .TaskUpdate import TaskUpdate
from .User import User

__all__ = [
    "CreateStatus",
    "Status",
    "Task",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
    "User",
]
