from fastapi import APIRouter, Depends
from sportsme.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    LogoutResponse, SessionResponse
)
from sportsme.modules.auth.service import AuthService
from sportsme.core.dependencies import get_auth_service, get_current_token, get_current_session
from sportsme.core.session import Session

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user; they confirm by email and are sent to /login"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    service.logout(token)
    return LogoutResponse(message="Logged out successfully")


@router.get("/me", response_model=SessionResponse)
async def get_current_user(session: Session = Depends(get_current_session)):
    return SessionResponse(**session.to_dict())
