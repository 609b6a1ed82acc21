from typing import Iterable, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.core.exceptions import AlreadyLikedError
from snsfeed.core.pagination import CursorPage, paginate
from snsfeed.models.like import LIKE_MODELS, LikeTargetType
from snsfeed.models.member import Member
from snsfeed.storage.like.like_interface import ILikeRepository


class SQLAlchemyLikeRepository(ILikeRepository):
    """
    One implementation for the three like tables; ``LIKE_MODELS`` picks the
    table and every model exposes its target column as ``target_id``.
    """

    def __init__(self, db: Session):
        self.db = db

    def exists(self, target_type: LikeTargetType, member_id: int, target_id: int) -> bool:
        model = LIKE_MODELS[target_type]
        row = (
            self.db.query(model.member_id)
            .filter(model.member_id == member_id, model.target_id == target_id)
            .first()
        )
        return row is not None

    def add(self, target_type: LikeTargetType, member_id: int, target_id: int) -> None:
        model = LIKE_MODELS[target_type]
        row = model(member_id=member_id, target_id=target_id)
        try:
            with transaction(self.db):
                self.db.add(row)
                self.db.flush()
        except IntegrityError as e:
            raise AlreadyLikedError(member_id=member_id, target_type=target_type.value, target_id=target_id) from e

    def remove(self, target_type: LikeTargetType, member_id: int, target_id: int) -> bool:
        model = LIKE_MODELS[target_type]
        with transaction(self.db):
            deleted = (
                self.db.query(model)
                .filter(model.member_id == member_id, model.target_id == target_id)
                .delete(synchronize_session="fetch")
            )
        return deleted > 0

    def liked_target_ids(self, target_type: LikeTargetType, member_id: int, target_ids: Iterable[int]) -> Set[int]:
        ids = set(target_ids)
        if not ids:
            return set()
        model = LIKE_MODELS[target_type]
        rows = (
            self.db.query(model.target_id)
            .filter(model.member_id == member_id, model.target_id.in_(ids))
            .all()
        )
        return {r[0] for r in rows}

    def list_likers(self, target_type: LikeTargetType, target_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        model = LIKE_MODELS[target_type]
        q = (
            self.db.query(Member)
            .join(model, model.member_id == Member.id)
            .filter(model.target_id == target_id, Member.deleted_at.is_(None))
        )
        return paginate(q, id_column=Member.id, limit=limit, cursor=cursor)
