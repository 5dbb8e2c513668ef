"""
Admin user deletion API.

Gated by the x-admin-token header. Error bodies are {"error": ...} rather
than FastAPI's {"detail": ...}.
"""

import json
import logging
import secrets
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from sportsme.config import settings
from sportsme.database.supabase_client import get_service_supabase
from sportsme.modules.admin.schemas import AdminDeleteResponse
from sportsme.modules.admin.service import AdminService, UserDeletionError
from supabase import Client
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class AdminAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def admin_api_error_handler(request: Request, exc: AdminAPIError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def verify_admin_token(x_admin_token: Optional[str] = Header(None)) -> None:
    """500 when no admin token is configured, 403 when the header is missing or wrong"""
    if not settings.admin_token:
        raise AdminAPIError(500, "Admin API not configured")
    if not x_admin_token or not secrets.compare_digest(
        x_admin_token.encode(), settings.admin_token.encode()
    ):
        raise AdminAPIError(403, "Forbidden")


def get_admin_service(admin_client: Client = Depends(get_service_supabase)) -> AdminService:
    return AdminService(admin_client)


@router.post("/users", dependencies=[Depends(verify_admin_token)])
async def delete_users(
    request: Request,
    service: AdminService = Depends(get_admin_service)
):
    """
    Delete one user ({"userId": ...}) or every user ({"deleteAll": true})
    together with their votes, comments, posts, memberships and owned groups.
    """
    try:
        body = json.loads(await request.body())
    except ValueError:
        raise AdminAPIError(400, "Invalid JSON body")
    if not isinstance(body, dict):
        body = {}

    if body.get("deleteAll"):
        try:
            results = service.delete_all_users()
        except Exception as e:
            logger.error(f"Admin delete-all failed: {e}")
            raise AdminAPIError(500, getattr(e, "message", None) or str(e))
        return JSONResponse(content=AdminDeleteResponse(results=results).to_body())

    user_id = body.get("userId")
    if not user_id or not isinstance(user_id, str):
        raise AdminAPIError(400, "userId is required")

    try:
        service.delete_user_with_data(user_id)
    except UserDeletionError as e:
        raise AdminAPIError(500, e.message)
    except Exception as e:
        logger.error(f"Admin delete of {user_id} failed: {e}")
        raise AdminAPIError(500, str(e))
    return JSONResponse(content=AdminDeleteResponse().to_body())
