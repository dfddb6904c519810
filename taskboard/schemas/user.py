from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from taskboard.models import GlobalRole

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[GlobalRole] = None
