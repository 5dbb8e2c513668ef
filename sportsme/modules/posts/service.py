import logging
import os
import time
from supabase import Client
from sportsme.modules.posts.schemas import UploadedFile
from sportsme.modules.posts.storage import get_attachment_storage
from sportsme.core.dependencies import check_group_member
from sportsme.core.session import Session
from typing import Any, Dict, List, Optional, Tuple
from fastapi import HTTPException

logger = logging.getLogger(__name__)

MIN_POLL_OPTIONS = 2


def attachment_path(group_id: int, post_id: int, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """<group>/<post>/<epoch ms>-<filename> inside the attachments bucket"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{group_id}/{post_id}/{timestamp_ms}-{os.path.basename(filename)}"


def clean_poll_options(options: Optional[List[str]]) -> List[str]:
    """Trimmed non-empty options, or nothing when fewer than two remain"""
    cleaned = [o.strip() for o in options or [] if o and o.strip()]
    return cleaned if len(cleaned) >= MIN_POLL_OPTIONS else []


class PostService:
    def __init__(self, supabase: Client, storage=None):
        self.supabase = supabase
        self.storage = storage or get_attachment_storage(supabase)

    def get_post(self, post_id: int) -> Dict[str, Any]:
        try:
            result = self.supabase.table("posts")\
                .select("id, group_id, type")\
                .eq("id", post_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load post.")
        if not result.data:
            raise HTTPException(status_code=404, detail="Post not found")
        return result.data[0]

    def get_post_for_member(self, post_id: int, session: Session) -> Dict[str, Any]:
        post = self.get_post(post_id)
        check_group_member(post["group_id"], session, self.supabase)
        return post

    def create_post(
        self,
        group_id: int,
        session: Session,
        content: str,
        post_type: str = "message",
        options: Optional[List[str]] = None,
        files: Optional[List[UploadedFile]] = None
    ) -> Tuple[int, Optional[str]]:
        """
        Create a message or poll post, then its attachments and poll options.

        Returns the new post id and a warning when some attachments or the
        poll options could not be saved. Those failures never undo the post.
        """
        check_group_member(group_id, session, self.supabase)
        content = content.strip()
        if not content:
            raise HTTPException(status_code=400, detail="Post content is required.")
        is_poll = post_type == "poll"

        try:
            result = self.supabase.table("posts").insert({
                "group_id": group_id,
                "author_id": session.user_id,
                "content": content,
                "type": "poll" if is_poll else "message",
                "author_name": session.display_name
            }).execute()
        except Exception as e:
            logger.error(f"Error creating post in group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create post.")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create post.")
        post_id = result.data[0]["id"]

        warning = None
        if files:
            warning = self._save_attachments(group_id, post_id, files)

        if is_poll:
            option_rows = [{"post_id": post_id, "text": text} for text in clean_poll_options(options)]
            if option_rows:
                try:
                    self.supabase.table("poll_options").insert(option_rows).execute()
                except Exception as e:
                    logger.error(f"Error creating poll options for post {post_id}: {e}")
                    warning = "Failed to create poll options."

        return post_id, warning

    def _save_attachments(self, group_id: int, post_id: int, files: List[UploadedFile]) -> Optional[str]:
        """Upload files one at a time; failed uploads are skipped and only logged"""
        rows = []
        for file in files:
            path = attachment_path(group_id, post_id, file.filename)
            try:
                url = self.storage.upload(path, file.content, file.content_type)
            except Exception as e:
                logger.warning(f"Attachment upload failed for {path}: {e}")
                continue
            rows.append({
                "post_id": post_id,
                "url": url,
                "original_name": file.filename,
                "mime_type": file.content_type,
                "size": file.size
            })

        if not rows:
            return None
        try:
            self.supabase.table("file_attachments").insert(rows).execute()
        except Exception as e:
            logger.error(f"Error saving attachments for post {post_id}: {e}")
            return "Some attachments failed to save."
        return None

    def create_comment(self, post_id: int, session: Session, content: str) -> int:
        """Add a comment; returns the post's group id"""
        post = self.get_post_for_member(post_id, session)
        content = content.strip()
        if not content:
            raise HTTPException(status_code=400, detail="Comment content is required.")
        try:
            self.supabase.table("comments").insert({
                "post_id": post_id,
                "author_id": session.user_id,
                "content": content,
                "author_name": session.display_name
            }).execute()
        except Exception as e:
            logger.error(f"Error adding comment to post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to add comment.")
        return post["group_id"]

    def vote(self, post_id: int, option_id: int, session: Session) -> int:
        """Cast or change the session user's vote; returns the post's group id"""
        post = self.get_post_for_member(post_id, session)
        try:
            option_result = self.supabase.table("poll_options")\
                .select("id")\
                .eq("id", option_id)\
                .eq("post_id", post_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading poll option {option_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to vote.")
        if not option_result.data:
            raise HTTPException(status_code=404, detail="Poll option not found.")

        try:
            self.supabase.table("poll_votes").upsert(
                {
                    "post_id": post_id,
                    "option_id": option_id,
                    "user_id": session.user_id
                },
                on_conflict="post_id,user_id"
            ).execute()
        except Exception as e:
            logger.error(f"Error voting on post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to vote.")
        return post["group_id"]
