from supabase import Client
from sportsme.modules.app.schemas import AppView
from sportsme.modules.auth.schemas import SessionResponse
from sportsme.modules.groups.schemas import GroupResponse
from sportsme.modules.groups.service import GroupService
from sportsme.modules.feed.schemas import FeedView
from sportsme.modules.feed.service import FeedService
from sportsme.modules.feed.view import build_feed_view
from sportsme.core.session import Session
from typing import List, Optional


class AppService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.groups = GroupService(supabase)
        self.feeds = FeedService(supabase)

    def load_feed_view(self, group_id: int, session: Session, warning: Optional[str] = None) -> FeedView:
        snapshot = self.feeds.load_feed(group_id)
        return build_feed_view(snapshot, session.user_id, warning=warning)

    def build_view(
        self,
        session: Session,
        groups: List[GroupResponse],
        selected_group_id: Optional[int] = None
    ) -> AppView:
        """Select a group (the requested one if listed, else the first) and load its feed"""
        group_ids = [g.id for g in groups]
        if selected_group_id not in group_ids:
            selected_group_id = group_ids[0] if group_ids else None

        feed = FeedView()
        if selected_group_id is not None:
            feed = self.load_feed_view(selected_group_id, session)

        return AppView(
            user=SessionResponse(**session.to_dict()),
            groups=groups,
            selected_group_id=selected_group_id,
            feed=feed,
        )

    def load(self, session: Session, selected_group_id: Optional[int] = None) -> AppView:
        return self.build_view(session, self.groups.list_user_groups(session.user_id), selected_group_id)

    def with_group_first(self, session: Session, group: GroupResponse) -> AppView:
        """View after creating or joining: the group is listed (once) and selected"""
        groups = self.groups.list_user_groups(session.user_id)
        if not any(g.id == group.id for g in groups):
            groups = [group] + groups
        return self.build_view(session, groups, group.id)
