from pydantic import BaseModel, Field

from .Task import CreateStatus


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=2000)
    status: CreateStatus = "TODO"
