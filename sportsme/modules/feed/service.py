from dataclasses import dataclass, field
from supabase import Client
from sportsme.modules.feed.schemas import (
    PostRow, CommentRow, AttachmentRow, PollOptionRow, PollVoteRow
)
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

POST_COLUMNS = "id, group_id, content, type, created_at, author_name"

# Loaded after the posts, in this order, for the post ids of the group.
# (snapshot attribute, table, columns, message shown when the query fails)
FEED_DETAIL_QUERIES = (
    ("comments", "comments", "id, post_id, content, created_at, author_name", "Failed to load comments."),
    ("attachments", "file_attachments", "id, post_id, url, original_name, mime_type, size", "Failed to load attachments."),
    ("poll_options", "poll_options", "id, post_id, text", "Failed to load poll options."),
    ("poll_votes", "poll_votes", "id, post_id, option_id, user_id", "Failed to load poll votes."),
)

_ROW_MODELS = {
    "comments": CommentRow,
    "attachments": AttachmentRow,
    "poll_options": PollOptionRow,
    "poll_votes": PollVoteRow,
}


@dataclass
class FeedSnapshot:
    """Raw rows of one group's feed. error is set when a query stopped the load early."""
    group_id: Optional[int] = None
    posts: List[PostRow] = field(default_factory=list)
    comments: List[CommentRow] = field(default_factory=list)
    attachments: List[AttachmentRow] = field(default_factory=list)
    poll_options: List[PollOptionRow] = field(default_factory=list)
    poll_votes: List[PollVoteRow] = field(default_factory=list)
    error: Optional[str] = None


class FeedService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def load_feed(self, group_id: int) -> FeedSnapshot:
        """
        Load a group's feed with five dependent queries: posts (newest first),
        then comments, attachments, poll options and poll votes for those posts.

        The first failing query ends the load; rows fetched before it are kept
        and the snapshot carries the error message.
        """
        snapshot = FeedSnapshot(group_id=group_id)
        try:
            posts_result = self.supabase.table("posts")\
                .select(POST_COLUMNS)\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading posts for group {group_id}: {e}")
            snapshot.error = "Failed to load posts."
            return snapshot

        snapshot.posts = [PostRow(**row) for row in posts_result.data or []]
        post_ids = [post.id for post in snapshot.posts]
        if not post_ids:
            return snapshot

        for attr, table, columns, failure_message in FEED_DETAIL_QUERIES:
            try:
                result = self.supabase.table(table)\
                    .select(columns)\
                    .in_("post_id", post_ids)\
                    .execute()
            except Exception as e:
                logger.error(f"Error loading {table} for group {group_id}: {e}")
                snapshot.error = failure_message
                return snapshot
            model = _ROW_MODELS[attr]
            setattr(snapshot, attr, [model(**row) for row in result.data or []])

        return snapshot
