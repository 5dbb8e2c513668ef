from dataclasses import dataclass
from pydantic import BaseModel


class CommentCreate(BaseModel):
    content: str


class VoteRequest(BaseModel):
    option_id: int


@dataclass
class UploadedFile:
    """A file received with a post, already read into memory"""
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)
