from pydantic import BaseModel
from typing import Optional


class GroupCreate(BaseModel):
    name: str


class GroupJoin(BaseModel):
    code: str


class GroupResponse(BaseModel):
    id: int
    name: str
    code: str
    owner_id: Optional[str] = None

    class Config:
        from_attributes = True
