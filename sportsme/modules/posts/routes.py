from fastapi import APIRouter, Depends, File, Form, UploadFile
from sportsme.database.supabase_client import get_supabase
from sportsme.modules.posts.schemas import CommentCreate, VoteRequest, UploadedFile
from sportsme.modules.posts.service import PostService
from sportsme.modules.posts.storage import get_attachment_storage
from sportsme.modules.app.service import AppService
from sportsme.modules.feed.schemas import FeedView, PostType
from sportsme.core.dependencies import get_current_session
from sportsme.core.session import Session
from supabase import Client
from typing import List, Optional

router = APIRouter(tags=["posts"])


def get_post_service(supabase: Client = Depends(get_supabase)) -> PostService:
    return PostService(supabase, get_attachment_storage(supabase))


def get_app_service(supabase: Client = Depends(get_supabase)) -> AppService:
    return AppService(supabase)


@router.post("/groups/{group_id}/posts", response_model=FeedView, status_code=201)
async def create_post(
    group_id: int,
    content: str = Form(...),
    post_type: PostType = Form("message", alias="type"),
    options: Optional[List[str]] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    session: Session = Depends(get_current_session),
    service: PostService = Depends(get_post_service),
    app_service: AppService = Depends(get_app_service)
):
    """
    Create a message or poll in a group.
    Attachments are uploaded one by one; a poll needs at least two non-empty
    options for any option to be saved. Returns the reloaded feed, with a
    warning when some attachments or the poll options could not be saved.
    """
    uploads = []
    for file in files or []:
        if not file.filename:
            continue
        uploads.append(UploadedFile(
            filename=file.filename,
            content_type=file.content_type or "application/octet-stream",
            content=await file.read()
        ))
    _, warning = service.create_post(group_id, session, content, post_type, options, uploads)
    return app_service.load_feed_view(group_id, session, warning=warning)


@router.post("/posts/{post_id}/comments", response_model=FeedView, status_code=201)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    session: Session = Depends(get_current_session),
    service: PostService = Depends(get_post_service),
    app_service: AppService = Depends(get_app_service)
):
    """Comment on a post; returns the reloaded feed"""
    group_id = service.create_comment(post_id, session, comment_data.content)
    return app_service.load_feed_view(group_id, session)


@router.put("/posts/{post_id}/vote", response_model=FeedView)
async def vote(
    post_id: int,
    vote_data: VoteRequest,
    session: Session = Depends(get_current_session),
    service: PostService = Depends(get_post_service),
    app_service: AppService = Depends(get_app_service)
):
    """Vote on a poll; voting again replaces the earlier choice"""
    group_id = service.vote(post_id, vote_data.option_id, session)
    return app_service.load_feed_view(group_id, session)
