from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from snsfeed.schemas.member import UserInfoWithFollowing


class CommentCreate(BaseModel):
    """
    Create a comment on a post, or a recomment when parent_id is given.
    """
    member_id: int
    content: str = Field(min_length=1, max_length=2000)
    parent_id: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class CommentInfo(BaseModel):
    id: int
    post_id: int
    user: UserInfoWithFollowing
    content: str
    created_at: datetime
    like_count: int
    recomment_count: int
    is_mine: bool = False
    is_liked: bool = False


class RecommentInfo(BaseModel):
    id: int
    comment_id: int
    user: UserInfoWithFollowing
    content: str
    created_at: datetime
    like_count: int
    is_mine: bool = False
    is_liked: bool = False


class CreateCommentOut(BaseModel):
    id: int
    post_id: int
    parent_id: Optional[int] = None
    member_id: int
    content: str
    created_at: datetime


class BatchCommentsOut(BaseModel):
    count: int
    items: List[CommentInfo]
    has_next: bool
    next_cursor: Optional[int] = None


class BatchRecommentsOut(BaseModel):
    count: int
    items: List[RecommentInfo]
    has_next: bool
    next_cursor: Optional[int] = None
