from typing import Optional, Protocol, Tuple

from snsfeed.models.like import LikeTargetType


class ICounterRepository(Protocol):
    """
    The only code allowed to write denormalized counters. Each method is a
    single ``UPDATE ... SET c = c + :step`` and returns the value after it
    (None when the owning row does not exist).
    """

    def update_like_count(self, target_type: LikeTargetType, target_id: int, step: int) -> Optional[int]:
        ...

    def update_follow_counts(self, follower_id: int, following_id: int, step: int) -> Tuple[Optional[int], Optional[int]]:
        """(follower's following_count, following's follower_count)"""
        ...

    def update_recomment_count(self, comment_id: int, step: int) -> Optional[int]:
        ...

    def update_comment_count(self, post_id: int, step: int) -> Optional[int]:
        ...
