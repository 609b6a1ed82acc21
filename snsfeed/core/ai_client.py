from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from snsfeed.core import config
from snsfeed.core.exceptions import ExternalServiceFailure
from snsfeed.core.logx import logger
from snsfeed.schemas.bot import (
    AiEnvelope,
    BotPostRequest,
    BotPostResult,
    BotRecommentRequest,
    BotRecommentResult,
    YoutubeSummaryRequest,
    YoutubeSummaryResult,
)

R = TypeVar("R", bound=BaseModel)


class GenerationClient:
    """
    Blocking client for the generation (AI) service.

    Callers are post-commit side effects running on the worker pool, never a
    request thread, so a plain ``httpx.Client`` is used. Anything that goes
    wrong on the wire or in the body comes out as ``ExternalServiceFailure``.
    """

    def __init__(
        self,
        base_url: str = config.AI_SERVER_URL,
        timeout: float = config.AI_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def _post(self, path: str, payload: BaseModel, result_type: Type[R]) -> R:
        try:
            response = self._http.post(path, json=payload.model_dump(mode="json"))
        except httpx.HTTPError as e:
            raise ExternalServiceFailure(f"POST {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"[AI] POST {path} -> {response.status_code}: {response.text[:500]}")
            raise ExternalServiceFailure(
                f"POST {path} returned {response.status_code}", status_code=response.status_code
            )

        try:
            envelope = AiEnvelope[result_type].model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ExternalServiceFailure(f"POST {path} returned a malformed body: {e}") from e
        return envelope.data

    # ---------- endpoints ----------

    def generate_recomment(self, request: BotRecommentRequest) -> str:
        result = self._post("/recomments/bot", request, BotRecommentResult)
        if not result.content.strip():
            raise ExternalServiceFailure("generated recomment is empty")
        return result.content

    def generate_post(self, request: BotPostRequest) -> BotPostResult:
        result = self._post("/posts/bot", request, BotPostResult)
        if not result.content.strip():
            raise ExternalServiceFailure("generated post is empty")
        return result

    def summarize_youtube(self, url: str) -> str:
        result = self._post("/posts/youtube/summary", YoutubeSummaryRequest(url=url), YoutubeSummaryResult)
        return result.summary
