from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.core.pagination import CursorPage, paginate
from snsfeed.core.time import now_kst
from snsfeed.models.member import Member, MemberRole
from snsfeed.models.post import Post, PostImage
from snsfeed.storage.post.post_interface import IPostRepository


class SQLAlchemyPostRepository(IPostRepository):

    def __init__(self, db: Session):
        self.db = db

    # ---------- base queries ----------

    def _active_query(self):
        """Posts that are not soft-deleted"""
        return self.db.query(Post).filter(Post.deleted_at.is_(None))

    # ---------- writes ----------

    def create_post(
        self,
        member_id: int,
        board_type: str,
        content: str,
        youtube_url: Optional[str] = None,
        youtube_summary: Optional[str] = None,
    ) -> Post:
        post = Post(
            member_id=member_id,
            board_type=board_type,
            content=content,
            youtube_url=youtube_url,
            youtube_summary=youtube_summary,
            like_count=0,
            comment_count=0,
        )
        with transaction(self.db):
            self.db.add(post)
            self.db.flush()
        return post

    def add_image(self, post_id: int, img_url: str, sort_index: int = 0) -> PostImage:
        image = PostImage(post_id=post_id, img_url=img_url, sort_index=sort_index)
        with transaction(self.db):
            self.db.add(image)
            self.db.flush()
        return image

    def update_youtube_summary(self, post_id: int, summary: str) -> None:
        with transaction(self.db):
            self.db.query(Post).filter(Post.id == post_id).update(
                {Post.youtube_summary: summary}, synchronize_session="fetch"
            )

    def soft_delete(self, post_id: int) -> bool:
        with transaction(self.db):
            matched = (
                self._active_query()
                .filter(Post.id == post_id)
                .update({Post.deleted_at: now_kst()}, synchronize_session="fetch")
            )
        return matched > 0

    # ---------- reads ----------

    def get_post(self, post_id: int) -> Optional[Post]:
        return self._active_query().filter(Post.id == post_id).first()

    def list_board_posts(self, board_type: str, limit: int, cursor: Optional[int] = None) -> CursorPage:
        q = self._active_query().filter(Post.board_type == board_type)
        return paginate(q, id_column=Post.id, created_column=Post.created_at, limit=limit, cursor=cursor)

    def list_member_posts(self, member_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        q = self._active_query().filter(Post.member_id == member_id)
        return paginate(q, id_column=Post.id, created_column=Post.created_at, limit=limit, cursor=cursor)

    def first_image_urls(self, post_ids: Iterable[int]) -> Dict[int, str]:
        ids = set(post_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(PostImage.post_id, PostImage.img_url)
            .filter(PostImage.post_id.in_(ids))
            .order_by(PostImage.post_id, PostImage.sort_index, PostImage.id)
            .all()
        )
        result: Dict[int, str] = {}
        for post_id, img_url in rows:
            result.setdefault(post_id, img_url)
        return result

    def count_board_non_bot_posts(self, board_type: str) -> int:
        return (
            self.db.query(func.count(Post.id))
            .join(Member, Member.id == Post.member_id)
            .filter(
                Post.board_type == board_type,
                Post.deleted_at.is_(None),
                Member.role != MemberRole.BOT.value,
            )
            .scalar()
        ) or 0
