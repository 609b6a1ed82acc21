from typing import List, Optional

from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.core.pagination import CursorPage, paginate
from snsfeed.core.time import now_kst
from snsfeed.models.comment import Comment, Recomment
from snsfeed.storage.comment.comment_interface import ICommentRepository


class SQLAlchemyCommentRepository(ICommentRepository):

    def __init__(self, db: Session):
        self.db = db

    # ---------- base queries ----------

    def _active_comments(self):
        return self.db.query(Comment).filter(Comment.deleted_at.is_(None))

    def _active_recomments(self):
        return self.db.query(Recomment).filter(Recomment.deleted_at.is_(None))

    # ---------- writes ----------

    def create_comment(self, post_id: int, member_id: int, content: str) -> Comment:
        comment = Comment(
            post_id=post_id,
            member_id=member_id,
            content=content,
            like_count=0,
            recomment_count=0,
        )
        with transaction(self.db):
            self.db.add(comment)
            self.db.flush()
        return comment

    def create_recomment(self, comment_id: int, member_id: int, content: str) -> Recomment:
        recomment = Recomment(
            comment_id=comment_id,
            member_id=member_id,
            content=content,
            like_count=0,
        )
        with transaction(self.db):
            self.db.add(recomment)
            self.db.flush()
        return recomment

    def soft_delete_comment(self, comment_id: int) -> bool:
        """False when the comment was already gone, so two racing deletes match once."""
        with transaction(self.db):
            matched = (
                self._active_comments()
                .filter(Comment.id == comment_id)
                .update({Comment.deleted_at: now_kst()}, synchronize_session="fetch")
            )
        return matched > 0

    def soft_delete_recomment(self, recomment_id: int) -> bool:
        with transaction(self.db):
            matched = (
                self._active_recomments()
                .filter(Recomment.id == recomment_id)
                .update({Recomment.deleted_at: now_kst()}, synchronize_session="fetch")
            )
        return matched > 0

    # ---------- reads ----------

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self._active_comments().filter(Comment.id == comment_id).first()

    def get_recomment(self, recomment_id: int) -> Optional[Recomment]:
        return self._active_recomments().filter(Recomment.id == recomment_id).first()

    def list_comments(self, post_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        q = self._active_comments().filter(Comment.post_id == post_id)
        return paginate(q, id_column=Comment.id, created_column=Comment.created_at, limit=limit, cursor=cursor)

    def list_recomments(self, comment_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        q = self._active_recomments().filter(Recomment.comment_id == comment_id)
        return paginate(q, id_column=Recomment.id, created_column=Recomment.created_at, limit=limit, cursor=cursor)

    def all_recomments(self, comment_id: int) -> List[Recomment]:
        return (
            self._active_recomments()
            .filter(Recomment.comment_id == comment_id)
            .order_by(Recomment.created_at.asc(), Recomment.id.asc())
            .all()
        )
