from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from snsfeed.schemas.member import FollowUserInfo


class FollowCreate(BaseModel):
    """
    follower_user_id starts following following_user_id
    """
    follower_user_id: int
    following_user_id: int

    model_config = ConfigDict(extra="forbid")


class FollowCancel(FollowCreate):
    pass


class FollowOut(BaseModel):
    """
    Edge after the change plus both members' counters
    """
    follower_user_id: int
    following_user_id: int
    following: bool
    follower_following_count: int     # following_count of follower_user_id
    following_follower_count: int     # follower_count of following_user_id


class BatchFollowsOut(BaseModel):
    count: int
    items: List[FollowUserInfo]
    has_next: bool
    next_cursor: Optional[int] = None
