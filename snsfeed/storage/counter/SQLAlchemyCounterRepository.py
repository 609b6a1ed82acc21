import warnings
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.core.exceptions import DataIntegrityWarning
from snsfeed.core.logx import logger
from snsfeed.models.comment import Comment, Recomment
from snsfeed.models.like import LikeTargetType
from snsfeed.models.member import Member
from snsfeed.models.post import Post
from snsfeed.storage.counter.counter_interface import ICounterRepository

_LIKE_COUNT_OWNERS = {
    LikeTargetType.POST: Post,
    LikeTargetType.COMMENT: Comment,
    LikeTargetType.RECOMMENT: Recomment,
}


class SQLAlchemyCounterRepository(ICounterRepository):

    def __init__(self, db: Session):
        self.db = db

    def _step(self, model, column_name: str, row_id: int, step: int) -> Optional[int]:
        column = getattr(model, column_name)
        with transaction(self.db):
            matched = (
                self.db.query(model)
                .filter(model.id == row_id)
                .update({column: column + step}, synchronize_session="fetch")
            )
        if not matched:
            return None

        value = self.db.query(column).filter(model.id == row_id).scalar()
        if value is not None and value < 0:
            # not clamped: a negative counter means a join-row change bypassed us
            msg = f"{model.__tablename__}.{column_name} of id={row_id} went negative ({value})"
            logger.warning(f"[COUNTER] DataIntegrityWarning: {msg}")
            warnings.warn(msg, DataIntegrityWarning, stacklevel=3)
        return value

    def update_like_count(self, target_type: LikeTargetType, target_id: int, step: int) -> Optional[int]:
        return self._step(_LIKE_COUNT_OWNERS[target_type], "like_count", target_id, step)

    def update_follow_counts(self, follower_id: int, following_id: int, step: int) -> Tuple[Optional[int], Optional[int]]:
        following_count = self._step(Member, "following_count", follower_id, step)
        follower_count = self._step(Member, "follower_count", following_id, step)
        return following_count, follower_count

    def update_recomment_count(self, comment_id: int, step: int) -> Optional[int]:
        return self._step(Comment, "recomment_count", comment_id, step)

    def update_comment_count(self, post_id: int, step: int) -> Optional[int]:
        return self._step(Post, "comment_count", post_id, step)
