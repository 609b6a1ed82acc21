from typing import Dict, Iterable, Optional, Protocol

from snsfeed.core.pagination import CursorPage
from snsfeed.models.post import Post, PostImage


class IPostRepository(Protocol):
    """
    Post repository protocol.
    """

    def create_post(
        self,
        member_id: int,
        board_type: str,
        content: str,
        youtube_url: Optional[str] = None,
        youtube_summary: Optional[str] = None,
    ) -> Post:
        """Insert a post with both counters at zero."""
        ...

    def add_image(self, post_id: int, img_url: str, sort_index: int = 0) -> PostImage:
        ...

    def get_post(self, post_id: int) -> Optional[Post]:
        """Live post by id."""
        ...

    def list_board_posts(self, board_type: str, limit: int, cursor: Optional[int] = None) -> CursorPage:
        """Newest first: created_at DESC, id DESC, id < cursor."""
        ...

    def list_member_posts(self, member_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        ...

    def first_image_urls(self, post_ids: Iterable[int]) -> Dict[int, str]:
        """First image (lowest sort_index) per post, one query for the whole set."""
        ...

    def count_board_non_bot_posts(self, board_type: str) -> int:
        ...

    def update_youtube_summary(self, post_id: int, summary: str) -> None:
        ...

    def soft_delete(self, post_id: int) -> bool:
        ...
