import logging
from dataclasses import dataclass
from supabase import Client
from sportsme.config import settings
from sportsme.modules.admin.schemas import UserDeleteResult
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeStep:
    table: str
    column: str

    def __str__(self) -> str:
        return f"{self.table}.{self.column}"


# Foreign-key order: referencing rows first, the auth account after the last step.
USER_CASCADE_STEPS: Tuple[CascadeStep, ...] = (
    CascadeStep("poll_votes", "user_id"),
    CascadeStep("comments", "author_id"),
    CascadeStep("posts", "author_id"),
    CascadeStep("group_memberships", "user_id"),
    CascadeStep("groups", "owner_id"),
)


@dataclass
class StepOutcome:
    step: CascadeStep
    ok: bool
    error: Optional[str] = None


class UserDeletionError(Exception):
    def __init__(self, user_id: str, message: str):
        super().__init__(message)
        self.user_id = user_id
        self.message = message


def run_cascade(
    client: Client,
    user_id: str,
    steps: Tuple[CascadeStep, ...] = USER_CASCADE_STEPS
) -> List[StepOutcome]:
    """
    Delete the user's rows step by step, in order.

    A failing step is recorded and the remaining steps still run. Nothing is
    rolled back.
    """
    outcomes = []
    for step in steps:
        try:
            client.table(step.table).delete().eq(step.column, user_id).execute()
            outcomes.append(StepOutcome(step=step, ok=True))
        except Exception as e:
            logger.warning(f"Cascade step {step} failed for user {user_id}: {e}")
            outcomes.append(StepOutcome(step=step, ok=False, error=str(e)))
    return outcomes


class AdminService:
    def __init__(self, admin_client: Client):
        self.admin_client = admin_client

    def delete_user_with_data(self, user_id: str) -> List[StepOutcome]:
        """Run the row cascade, then delete the auth account. Raises UserDeletionError on any failure."""
        outcomes = run_cascade(self.admin_client, user_id)
        errors = [f"{o.step}: {o.error}" for o in outcomes if not o.ok]

        try:
            self.admin_client.auth.admin.delete_user(user_id)
        except Exception as e:
            logger.error(f"Auth deletion failed for user {user_id}: {e}")
            errors.append(getattr(e, "message", None) or str(e))

        if errors:
            raise UserDeletionError(user_id, "; ".join(errors))
        logger.info(f"Deleted user {user_id} and their data")
        return outcomes

    def list_user_ids(self) -> List[str]:
        users = self.admin_client.auth.admin.list_users(
            page=1,
            per_page=settings.admin_list_users_per_page
        )
        return [user.id for user in users or []]

    def delete_all_users(self) -> List[UserDeleteResult]:
        """Delete every listed user one at a time, collecting a result per user"""
        user_ids = self.list_user_ids()
        logger.warning(f"Deleting all {len(user_ids)} users")
        results = []
        for user_id in user_ids:
            try:
                self.delete_user_with_data(user_id)
                results.append(UserDeleteResult(user_id=user_id, ok=True))
            except Exception as e:
                results.append(UserDeleteResult(
                    user_id=user_id,
                    ok=False,
                    error=getattr(e, "message", None) or str(e)
                ))
        return results
