from pydantic import BaseModel, EmailStr, Field
from taskboard.models import GlobalRole

class SignupReq(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    role: GlobalRole

class LoginReq(BaseModel):
    email: EmailStr
    password: str
