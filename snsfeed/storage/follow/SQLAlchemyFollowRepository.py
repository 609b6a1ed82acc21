from typing import Iterable, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.core.exceptions import AlreadyFollowingError
from snsfeed.core.pagination import CursorPage, paginate
from snsfeed.models.follow import Follow
from snsfeed.models.member import Member
from snsfeed.storage.follow.follow_interface import IFollowRepository


class SQLAlchemyFollowRepository(IFollowRepository):

    def __init__(self, db: Session):
        self.db = db

    def _edge(self, follower_id: int, following_id: int):
        return self.db.query(Follow).filter(
            Follow.follower_user_id == follower_id,
            Follow.following_user_id == following_id,
        )

    def exists(self, follower_id: int, following_id: int) -> bool:
        return self._edge(follower_id, following_id).with_entities(Follow.id).first() is not None

    def add(self, follower_id: int, following_id: int) -> Follow:
        follow = Follow(follower_user_id=follower_id, following_user_id=following_id)
        try:
            with transaction(self.db):
                self.db.add(follow)
                self.db.flush()
        except IntegrityError as e:
            raise AlreadyFollowingError(follower_id, following_id) from e
        return follow

    def remove(self, follower_id: int, following_id: int) -> bool:
        with transaction(self.db):
            deleted = self._edge(follower_id, following_id).delete(synchronize_session="fetch")
        return deleted > 0

    def followed_ids(self, follower_id: int, candidate_ids: Iterable[int]) -> Set[int]:
        ids = set(candidate_ids)
        if not ids:
            return set()
        rows = (
            self.db.query(Follow.following_user_id)
            .filter(Follow.follower_user_id == follower_id, Follow.following_user_id.in_(ids))
            .all()
        )
        return {r[0] for r in rows}

    # ---------- listings ----------

    def list_followers(self, member_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        q = (
            self.db.query(Member)
            .join(Follow, Follow.follower_user_id == Member.id)
            .filter(Follow.following_user_id == member_id, Member.deleted_at.is_(None))
        )
        return paginate(q, id_column=Member.id, limit=limit, cursor=cursor, ascending=True)

    def list_followings(self, member_id: int, limit: int, cursor: Optional[int] = None) -> CursorPage:
        q = (
            self.db.query(Member)
            .join(Follow, Follow.following_user_id == Member.id)
            .filter(Follow.follower_user_id == member_id, Member.deleted_at.is_(None))
        )
        return paginate(q, id_column=Member.id, limit=limit, cursor=cursor, ascending=True)
