from typing import Iterable, Optional, Protocol, Set

from snsfeed.core.pagination import CursorPage
from snsfeed.models.follow import Follow


class IFollowRepository(Protocol):
    """
    Follow edges. follower/following counters are not touched here.
    """

    def exists(self, follower_id: int, following_id: int) -> bool:
        ...

    def add(self, follower_id: int, following_id: int) -> Follow:
        """Insert the edge; a unique-key violation raises AlreadyFollowingError."""
        ...

    def remove(self, follower_id: int, following_id: int) -> bool:
        ...

    def followed_ids(self, follower_id: int, candidate_ids: Iterable[int]) -> Set[int]:
        """Subset of ``candidate_ids`` that ``follower_id`` follows, one query."""
        ...

    def list_followers(self, member_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        """Members following ``member_id``, member id ASC (cursor: id > cursor)."""
        ...

    def list_followings(self, member_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        """Members ``member_id`` follows, member id ASC (cursor: id > cursor)."""
        ...
