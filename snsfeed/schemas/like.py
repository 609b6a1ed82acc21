from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from snsfeed.models.like import LikeTargetType
from snsfeed.schemas.member import FollowUserInfo


class LikeCreate(BaseModel):
    member_id: int
    target_type: LikeTargetType
    target_id: int

    model_config = ConfigDict(extra="forbid")


class LikeCancel(LikeCreate):
    pass


class LikeOut(BaseModel):
    """Result of like / unlike with the target's like_count after the change."""
    member_id: int
    target_type: LikeTargetType
    target_id: int
    liked: bool
    like_count: int


class BatchUsersOut(BaseModel):
    count: int
    items: List[FollowUserInfo]
    has_next: bool
    next_cursor: Optional[int] = None
