from typing import Callable, Optional

from sqlalchemy.orm import Session

from snsfeed.core.ai_client import GenerationClient
from snsfeed.core.exceptions import ExternalServiceFailure
from snsfeed.core.logx import logger
from snsfeed.models.post import YoutubeSummaryStatus
from snsfeed.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository

_STATUS_MARKERS = {s.value for s in YoutubeSummaryStatus}


class YoutubeSummarizer:
    """
    Fills posts.youtube_summary after the post has committed. The summary is
    IN_PROGRESS until this runs; on any generation failure it becomes FAILED.
    """

    def __init__(self, session_factory: Callable[[], Session], client: GenerationClient):
        self.session_factory = session_factory
        self.client = client

    def trigger(self, post_id: int) -> Optional[str]:
        try:
            return self.handle(post_id)
        except Exception:
            logger.exception(f"[YOUTUBE] summary of post {post_id} failed")
            return None

    def handle(self, post_id: int) -> Optional[str]:
        with self.session_factory() as db:
            post = SQLAlchemyPostRepository(db).get_post(post_id)
            if post is None or not post.youtube_url:
                logger.info(f"[YOUTUBE] post {post_id} gone or without url, nothing to summarize")
                return None
            url = post.youtube_url

        try:
            summary = self.client.summarize_youtube(url)
            if not summary.strip() or summary in _STATUS_MARKERS:
                raise ExternalServiceFailure(f"unusable summary for {url}: {summary!r}")
        except ExternalServiceFailure as e:
            logger.error(f"[YOUTUBE] post {post_id}: {e}")
            summary = YoutubeSummaryStatus.FAILED.value

        with self.session_factory() as db:
            SQLAlchemyPostRepository(db).update_youtube_summary(post_id, summary)
        logger.info(f"[YOUTUBE] post {post_id} summary stored ({len(summary)} chars)")
        return summary
