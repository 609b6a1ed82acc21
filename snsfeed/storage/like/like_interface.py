from typing import Iterable, Optional, Protocol, Set

from snsfeed.core.pagination import CursorPage
from snsfeed.models.like import LikeTargetType


class ILikeRepository(Protocol):
    """
    Like join rows for posts, comments and recomments. Counter changes are
    not done here; see counter_svc.adjust_like.
    """

    def exists(self, target_type: LikeTargetType, member_id: int, target_id: int) -> bool:
        ...

    def add(self, target_type: LikeTargetType, member_id: int, target_id: int) -> None:
        """
        Insert the join row. A primary-key violation raises AlreadyLikedError
        (a concurrent request won the race after our existence check).
        """
        ...

    def remove(self, target_type: LikeTargetType, member_id: int, target_id: int) -> bool:
        """Delete the join row, False when there was nothing to delete."""
        ...

    def liked_target_ids(self, target_type: LikeTargetType, member_id: int, target_ids: Iterable[int]) -> Set[int]:
        """Subset of ``target_ids`` the member has liked, one query."""
        ...

    def list_likers(self, target_type: LikeTargetType, target_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        """Live members who liked the target, member id DESC, cursor is a member id."""
        ...
