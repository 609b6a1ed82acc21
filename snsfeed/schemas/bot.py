# Payloads exchanged with the generation (AI) service.
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BotUser(BaseModel):
    nickname: str
    class_name: Optional[str] = None


class BotPostItem(BaseModel):
    user: BotUser
    created_at: str
    content: str


class BotThreadPost(BotPostItem):
    id: int


class BotRecommentItem(BaseModel):
    user: BotUser
    created_at: str
    content: str


class BotThreadComment(BaseModel):
    id: int
    user: BotUser
    created_at: str
    content: str
    recomments: List[BotRecommentItem] = []


class BotRecommentRequest(BaseModel):
    board_type: str
    post: BotThreadPost
    comment: BotThreadComment


class BotRecommentResult(BaseModel):
    content: str
    board_type: Optional[str] = None
    post_id: Optional[int] = None
    comment_id: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class BotPostRequest(BaseModel):
    board_type: str
    posts: List[BotPostItem]


class BotPostResult(BaseModel):
    board_type: str
    content: str

    model_config = ConfigDict(extra="ignore")


class YoutubeSummaryRequest(BaseModel):
    url: str


class YoutubeSummaryResult(BaseModel):
    summary: str

    model_config = ConfigDict(extra="ignore")


class AiEnvelope(BaseModel, Generic[T]):
    """Every generation-service response is wrapped as {"data": ...}."""
    data: T

    model_config = ConfigDict(extra="ignore")
