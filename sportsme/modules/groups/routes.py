from fastapi import APIRouter, Depends, HTTPException
from sportsme.database.supabase_client import get_supabase
from sportsme.modules.groups.schemas import GroupCreate, GroupJoin, GroupResponse
from sportsme.modules.groups.service import GroupService
from sportsme.modules.app.schemas import AppView
from sportsme.modules.app.service import AppService
from sportsme.modules.feed.schemas import FeedView
from sportsme.core.dependencies import get_current_session, check_group_member
from sportsme.core.session import Session
from supabase import Client
from typing import List

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


def get_app_service(supabase: Client = Depends(get_supabase)) -> AppService:
    return AppService(supabase)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    session: Session = Depends(get_current_session),
    service: GroupService = Depends(get_group_service)
):
    """List the groups the current user belongs to"""
    return service.list_user_groups(session.user_id)


@router.post("", response_model=AppView, status_code=201)
async def create_group(
    group_data: GroupCreate,
    session: Session = Depends(get_current_session),
    service: GroupService = Depends(get_group_service),
    app_service: AppService = Depends(get_app_service)
):
    """Create a group with a fresh join code; the creator becomes its owner"""
    group = service.create_group(group_data.name, session)
    return app_service.with_group_first(session, group)


@router.post("/join", response_model=AppView)
async def join_group(
    join_data: GroupJoin,
    session: Session = Depends(get_current_session),
    service: GroupService = Depends(get_group_service),
    app_service: AppService = Depends(get_app_service)
):
    """Join a group by its code"""
    group = service.join_group(join_data.code, session)
    return app_service.with_group_first(session, group)


@router.delete("/{group_id}", response_model=AppView)
async def delete_group(
    group_id: int,
    confirm: bool = False,
    session: Session = Depends(get_current_session),
    service: GroupService = Depends(get_group_service),
    app_service: AppService = Depends(get_app_service)
):
    """Delete a group and all its posts (owner only, requires confirm=true)"""
    if not confirm:
        raise HTTPException(status_code=400, detail="Group deletion must be confirmed.")
    service.delete_group(group_id, session)
    return app_service.load(session)


@router.get("/{group_id}/feed", response_model=FeedView)
async def get_feed(
    group_id: int,
    session: Session = Depends(get_current_session),
    app_service: AppService = Depends(get_app_service),
    supabase: Client = Depends(get_supabase)
):
    """Posts of a group with their comments, attachments and poll results"""
    check_group_member(group_id, session, supabase)
    return app_service.load_feed_view(group_id, session)
