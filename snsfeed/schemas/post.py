from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from snsfeed.schemas.member import UserInfoWithFollowing


class PostCreate(BaseModel):
    """
    Create a post on a board.
    - image_url: stored as the first image (sort index 0)
    - youtube_url: a summary is generated after the post commits
    """
    member_id: int
    content: str = Field(min_length=1, max_length=2000)
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class PostDetails(BaseModel):
    id: int
    board_type: str
    user: UserInfoWithFollowing
    content: str
    image_url: Optional[str] = None
    youtube_url: Optional[str] = None
    youtube_summary: Optional[str] = None
    created_at: datetime
    like_count: int
    comment_count: int
    is_mine: bool = False
    is_liked: bool = False


class BatchPostsOut(BaseModel):
    """
    One page of posts
    - count: items on this page
    - next_cursor: pass back as ``cursor`` for the following page
    """
    count: int
    items: List[PostDetails]
    has_next: bool
    next_cursor: Optional[int] = None


class YoutubeSummaryOut(BaseModel):
    post_id: int
    youtube_url: str
    summary: str
