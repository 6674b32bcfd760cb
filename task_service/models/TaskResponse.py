from datetime import datetime

from pydantic import BaseModel

from .Task import Status, Task


class TaskResponse(BaseModel):
    id: str
    userId: str
    title: str
    description: str
    status: Status
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            userId=task.userId,
            title=task.title,
            description=task.description,
            status=task.status,
            createdAt=task.createdAt,
            updatedAt=task.updatedAt,
        )
