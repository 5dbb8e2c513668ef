import hashlib
import logging
import time
from supabase import Client
from sportsme.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from sportsme.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (every request resolves its session)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def auth_error_message(error: Exception) -> str:
    """Message reported by Supabase Auth, shown to the user verbatim."""
    return getattr(error, "message", None) or str(error)


def clear_auth_cache(token: Optional[str] = None) -> None:
    if token is None:
        _AUTH_USER_CACHE.clear()
        return
    _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)


class AuthService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.admin_client = admin_client

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        name = register_data.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name is required.")
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {"full_name": name},
                    "email_redirect_to": settings.get_email_redirect_url(),
                }
            })
        except Exception as e:
            logger.warning(f"Registration failed for {register_data.email}: {e}")
            raise HTTPException(status_code=400, detail=auth_error_message(e))

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            message="Check your email to confirm your account, then log in."
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            logger.info(f"Login failed for {login_data.email}: {e}")
            raise HTTPException(status_code=401, detail=auth_error_message(e))

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid login credentials")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Sign the token's session out of Supabase Auth"""
        clear_auth_cache(token)
        try:
            if self.admin_client is not None:
                self.admin_client.auth.admin.sign_out(token)
            else:
                self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")
            return False
