"""
Explicit request session.

Every service call that acts on behalf of a user receives a Session instead of
looking the user up from ambient client state.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

UNKNOWN_DISPLAY_NAME = "Unknown"


def derive_display_name(email: Optional[str], user_metadata: Optional[Dict[str, Any]]) -> str:
    """full_name from profile metadata, else email, else "Unknown"."""
    full_name = (user_metadata or {}).get("full_name")
    return full_name or email or UNKNOWN_DISPLAY_NAME


@dataclass(frozen=True)
class Session:
    user_id: str
    email: Optional[str]
    display_name: str
    access_token: str

    @classmethod
    def from_user_data(cls, user_data: Dict[str, Any], access_token: str) -> "Session":
        return cls(
            user_id=user_data["id"],
            email=user_data.get("email"),
            display_name=derive_display_name(user_data.get("email"), user_data.get("user_metadata")),
            access_token=access_token,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "display_name": self.display_name,
        }
