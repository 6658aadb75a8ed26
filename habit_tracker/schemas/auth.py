from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional


class RegisterRequest(BaseModel):
    """Schema for account registration."""
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    name: str

    @validator('name')
    def validate_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must be at least 2 characters')
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    """Public view of an account, merged from profile and identity."""
    id: str
    email: Optional[str] = None
    name: str = ""
    avatar_url: str = ""
    theme: str = "light"


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class LoginResponse(BaseModel):
    message: str
    access_token: str
    refresh_token: str
    user: UserOut


class MeResponse(BaseModel):
    user: UserOut


class OAuthUrlResponse(BaseModel):
    url: str


class MessageResponse(BaseModel):
    message: str
