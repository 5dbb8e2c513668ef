from pydantic import BaseModel
from typing import Optional, List, Literal
from datetime import datetime

PostType = Literal["message", "poll"]


class PostRow(BaseModel):
    id: int
    group_id: int
    content: str
    type: str
    created_at: datetime
    author_name: Optional[str] = None

    class Config:
        from_attributes = True


class CommentRow(BaseModel):
    id: int
    post_id: int
    content: str
    created_at: datetime
    author_name: Optional[str] = None

    class Config:
        from_attributes = True


class AttachmentRow(BaseModel):
    id: int
    post_id: int
    url: str
    original_name: str
    mime_type: str
    size: int

    class Config:
        from_attributes = True


class PollOptionRow(BaseModel):
    id: int
    post_id: int
    text: str

    class Config:
        from_attributes = True


class PollVoteRow(BaseModel):
    id: int
    post_id: int
    option_id: int
    user_id: str

    class Config:
        from_attributes = True


class AttachmentView(AttachmentRow):
    is_image: bool = False


class PollOptionTally(BaseModel):
    id: int
    text: str
    count: int
    percent: int
    selected: bool = False


class PollView(BaseModel):
    options: List[PollOptionTally]
    total_votes: int
    user_option_id: Optional[int] = None


class PostView(BaseModel):
    id: int
    group_id: int
    content: str
    type: str
    created_at: datetime
    author_name: Optional[str] = None
    comments: List[CommentRow] = []
    attachments: List[AttachmentView] = []
    poll: Optional[PollView] = None


class FeedView(BaseModel):
    group_id: Optional[int] = None
    posts: List[PostView] = []
    error: Optional[str] = None
    warning: Optional[str] = None
