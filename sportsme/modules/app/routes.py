from fastapi import APIRouter, Depends
from sportsme.database.supabase_client import get_supabase
from sportsme.modules.app.schemas import AppView
from sportsme.modules.app.service import AppService
from sportsme.core.dependencies import get_current_session
from sportsme.core.session import Session
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/app", tags=["app"])


def get_app_service(supabase: Client = Depends(get_supabase)) -> AppService:
    return AppService(supabase)


@router.get("", response_model=AppView)
async def load_app(
    group_id: Optional[int] = None,
    session: Session = Depends(get_current_session),
    service: AppService = Depends(get_app_service)
):
    """Signed-in user, their groups and the feed of group_id (or their first group)"""
    return service.load(session, group_id)
