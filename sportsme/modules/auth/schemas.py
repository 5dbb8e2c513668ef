from pydantic import BaseModel, EmailStr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    redirect_to: str = "/app"


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str
    redirect_to: str = "/login"


class LogoutResponse(BaseModel):
    message: str
    redirect_to: str = "/login"


class SessionResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    display_name: str
