from typing import List, Optional, Protocol

from snsfeed.core.pagination import CursorPage
from snsfeed.models.comment import Comment, Recomment


class ICommentRepository(Protocol):
    """
    Comment / recomment repository protocol. Counters live in the counter
    repository; this one never touches like_count or recomment_count.
    """

    def create_comment(self, post_id: int, member_id: int, content: str) -> Comment:
        ...

    def create_recomment(self, comment_id: int, member_id: int, content: str) -> Recomment:
        ...

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        ...

    def get_recomment(self, recomment_id: int) -> Optional[Recomment]:
        ...

    def list_comments(self, post_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        ...

    def list_recomments(self, comment_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        ...

    def all_recomments(self, comment_id: int) -> List[Recomment]:
        """Every live recomment of a comment, oldest first (bot thread context)."""
        ...

    def soft_delete_comment(self, comment_id: int) -> bool:
        ...

    def soft_delete_recomment(self, recomment_id: int) -> bool:
        ...
