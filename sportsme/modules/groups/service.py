import logging
import secrets
import string
from supabase import Client
from sportsme.modules.groups.schemas import GroupResponse
from sportsme.core.dependencies import check_group_owner
from sportsme.core.session import Session
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

GROUP_COLUMNS = "id, name, code, owner_id"
JOIN_CODE_ALPHABET = string.digits + string.ascii_lowercase
JOIN_CODE_LENGTH = 6


def generate_join_code(length: int = JOIN_CODE_LENGTH) -> str:
    """Short random base-36 code. Uniqueness is left to the groups.code constraint."""
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_user_groups(self, user_id: str) -> List[GroupResponse]:
        """Groups the user belongs to, most recently joined first"""
        try:
            result = self.supabase.table("group_memberships")\
                .select(f"group_id, created_at, groups ( {GROUP_COLUMNS} )")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading groups for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load groups.")

        return [
            GroupResponse(**membership["groups"])
            for membership in result.data or []
            if membership.get("groups")
        ]

    def get_group(self, group_id: int) -> GroupResponse:
        try:
            result = self.supabase.table("groups")\
                .select(GROUP_COLUMNS)\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load group.")
        if not result.data:
            raise HTTPException(status_code=404, detail="Group not found")
        return GroupResponse(**result.data[0])

    def create_group(self, name: str, session: Session) -> GroupResponse:
        """Create a group owned by the session user and add them as its owner member"""
        name = name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Group name is required.")

        try:
            result = self.supabase.table("groups").insert({
                "name": name,
                "code": generate_join_code(),
                "owner_id": session.user_id
            }).execute()
        except Exception as e:
            logger.error(f"Error creating group {name!r}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create group.")

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create group.")
        group = GroupResponse(**result.data[0])

        try:
            self.supabase.table("group_memberships").insert({
                "user_id": session.user_id,
                "group_id": group.id,
                "role": "owner"
            }).execute()
        except Exception as e:
            logger.warning(f"Group {group.id} created but owner membership failed: {e}")

        logger.info(f"Group {group.id} created by {session.user_id}")
        return group

    def join_group(self, code: str, session: Session) -> GroupResponse:
        """Join the group with this code. Rejoining leaves the single membership row in place."""
        code = code.strip()
        if not code:
            raise HTTPException(status_code=400, detail="Enter a group code.")

        try:
            result = self.supabase.table("groups")\
                .select(GROUP_COLUMNS)\
                .eq("code", code)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error looking up group code {code!r}: {e}")
            raise HTTPException(status_code=404, detail="Group code not found.")

        if not result.data:
            raise HTTPException(status_code=404, detail="Group code not found.")
        group = GroupResponse(**result.data[0])

        try:
            self.supabase.table("group_memberships").upsert(
                {
                    "user_id": session.user_id,
                    "group_id": group.id,
                    "role": "member"
                },
                on_conflict="user_id,group_id",
                ignore_duplicates=True
            ).execute()
        except Exception as e:
            logger.error(f"Error joining group {group.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to join group.")

        return group

    def delete_group(self, group_id: int, session: Session) -> None:
        """Delete a group the session user owns. Posts go with it through the store's cascade."""
        group = self.get_group(group_id)
        check_group_owner(group.model_dump(), session)
        try:
            self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete group.")
        logger.info(f"Group {group_id} deleted by {session.user_id}")
