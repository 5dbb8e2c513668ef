from pydantic import BaseModel
from typing import Optional, List

from sportsme.modules.auth.schemas import SessionResponse
from sportsme.modules.groups.schemas import GroupResponse
from sportsme.modules.feed.schemas import FeedView


class AppView(BaseModel):
    """Everything the main app screen shows: who is signed in, their groups, the active group's feed"""
    user: SessionResponse
    groups: List[GroupResponse] = []
    selected_group_id: Optional[int] = None
    feed: FeedView = FeedView()
