"""
Derived feed view.

Everything here is recomputed from a FeedSnapshot on each load: comments and
attachments grouped per post, poll tallies and the caller's current vote.
Nothing derived is ever written back to the store.
"""

import math
from typing import List, Optional

from sportsme.modules.feed.schemas import (
    AttachmentView, FeedView, PollOptionTally, PollView, PostRow, PostView
)
from sportsme.modules.feed.service import FeedSnapshot


def vote_percent(count: int, total: int) -> int:
    """Share of total as a whole percent, halves rounded up. 0 when nobody voted."""
    if not total:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


def build_poll_view(post: PostRow, snapshot: FeedSnapshot, user_id: Optional[str]) -> Optional[PollView]:
    options = [o for o in snapshot.poll_options if o.post_id == post.id]
    if post.type != "poll" or not options:
        return None

    votes = [v for v in snapshot.poll_votes if v.post_id == post.id]
    user_vote = next((v for v in votes if user_id and v.user_id == user_id), None)
    user_option_id = user_vote.option_id if user_vote else None

    counts = [(option, sum(1 for v in votes if v.option_id == option.id)) for option in options]
    total_votes = sum(count for _, count in counts)
    return PollView(
        options=[
            PollOptionTally(
                id=option.id,
                text=option.text,
                count=count,
                percent=vote_percent(count, total_votes),
                selected=option.id == user_option_id,
            )
            for option, count in counts
        ],
        total_votes=total_votes,
        user_option_id=user_option_id,
    )


def build_post_view(post: PostRow, snapshot: FeedSnapshot, user_id: Optional[str]) -> PostView:
    return PostView(
        **post.model_dump(),
        comments=[c for c in snapshot.comments if c.post_id == post.id],
        attachments=[
            AttachmentView(**a.model_dump(), is_image=a.mime_type.startswith("image/"))
            for a in snapshot.attachments
            if a.post_id == post.id
        ],
        poll=build_poll_view(post, snapshot, user_id),
    )


def build_feed_view(snapshot: FeedSnapshot, user_id: Optional[str], warning: Optional[str] = None) -> FeedView:
    posts: List[PostView] = [build_post_view(post, snapshot, user_id) for post in snapshot.posts]
    return FeedView(group_id=snapshot.group_id, posts=posts, error=snapshot.error, warning=warning)
