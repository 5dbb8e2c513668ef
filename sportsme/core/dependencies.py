"""
Core dependencies for session resolution and group access checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sportsme.database.supabase_client import get_supabase, get_service_supabase
from sportsme.modules.auth.service import AuthService
from sportsme.core.session import Session
from supabase import Client
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Client = Depends(get_service_supabase),
) -> AuthService:
    return AuthService(supabase, admin_client)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_session(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Session:
    """Resolve the signed-in user into an explicit Session"""
    user_data = auth_service.get_current_user(token)
    return Session.from_user_data(user_data, token)


def is_group_member(group_id: Any, user_id: str, supabase: Client) -> bool:
    member_result = supabase.table("group_memberships")\
        .select("id")\
        .eq("group_id", group_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    return bool(member_result.data)


def check_group_member(group_id: Any, session: Session, supabase: Client) -> Session:
    """Check if the session user is a member of a group"""
    try:
        allowed = is_group_member(group_id, session.user_id, supabase)
    except Exception as e:
        logger.error(f"Error checking membership of group {group_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify group membership.")
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a member of this group"
        )
    return session


def check_group_owner(group: Dict[str, Any], session: Session) -> Session:
    """Check the session user is the stored owner of a group row"""
    if group.get("owner_id") != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the group owner can delete this group"
        )
    return session
