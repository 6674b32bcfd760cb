from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

Status = Literal["TODO", "IN_PROGRESS", "DONE", "ARCHIVED"]
CreateStatus = Literal["TODO", "IN_PROGRESS", "DONE"]


class Task(BaseModel):
    id: str
    userId: str
    title: str
    description: str
    status: Status = "TODO"
    createdAt: datetime
    updatedAt: datetime
    deletedAt: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deletedAt is not None
