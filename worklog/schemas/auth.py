from pydantic import BaseModel, field_validator
from typing import Optional
from worklog.schemas.profile import ProfileResponse


# Request Schemas
class EmailCheck(BaseModel):
    email: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        if not v or not v.strip():
            raise ValueError('Email is required')
        return v.strip().lower()


class UserCreate(EmailCheck):
    password: str


class UserLogin(EmailCheck):
    password: str


class PasswordReset(EmailCheck):
    password: str


# Response Schemas
class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: ProfileResponse


class RegisterResponse(BaseModel):
    success: bool = True
    user: ProfileResponse
    message: Optional[str] = None
