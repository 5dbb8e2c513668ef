from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class UserDeleteResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(serialization_alias="userId")
    ok: bool
    error: Optional[str] = None


class AdminDeleteResponse(BaseModel):
    success: bool = True
    results: Optional[List[UserDeleteResult]] = None

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
