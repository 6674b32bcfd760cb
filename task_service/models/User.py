from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr


class User(BaseModel):
    id: str
    name: str
    email: EmailStr
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
