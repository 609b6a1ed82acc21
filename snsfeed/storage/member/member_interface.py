from typing import Dict, Iterable, Optional, Protocol

from snsfeed.models.member import Member
from snsfeed.schemas.member import MemberCreate


class IMemberRepository(Protocol):
    """
    Member repository protocol. Services depend on this, not on SQLAlchemy.
    """

    def create_member(self, data: MemberCreate) -> Member:
        ...

    def get_member(self, member_id: int) -> Optional[Member]:
        """Live member by id (soft-deleted rows are treated as missing)."""
        ...

    def get_members(self, member_ids: Iterable[int]) -> Dict[int, Member]:
        """
        Batched lookup by id set, one query. Soft-deleted members are included
        so that old content keeps its author block; callers check ``deleted_at``.
        """
        ...

    def find_bot(self) -> Optional[Member]:
        """The first live member with role BOT."""
        ...
