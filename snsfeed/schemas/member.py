from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from snsfeed.models.member import MemberRole


class MemberCreate(BaseModel):
    """
    Insert a member row. There is no signup flow in this service; seeding and
    tests go through this.
    """
    nickname: str = Field(min_length=1, max_length=40)
    profile_image_url: Optional[str] = None
    class_name: Optional[str] = None
    role: MemberRole = MemberRole.USER

    model_config = ConfigDict(extra="forbid")


class UserInfo(BaseModel):
    id: int
    nickname: str
    image_url: Optional[str] = None


class UserInfoWithFollowing(UserInfo):
    """Author block embedded in posts / comments / recomments."""
    is_followed: bool = False


class FollowUserInfo(BaseModel):
    """
    One row of a follower / following / liker listing.
    - is_followed: whether the viewer follows this member
    """
    id: int
    nickname: str
    image_url: Optional[str] = None
    class_name: Optional[str] = None
    is_followed: bool = False


class MemberProfileOut(BaseModel):
    id: int
    nickname: str
    image_url: Optional[str] = None
    class_name: Optional[str] = None
    follower_count: int
    following_count: int
    is_followed: bool = False
    is_mine: bool = False
