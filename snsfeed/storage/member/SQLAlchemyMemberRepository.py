from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from snsfeed.models.member import Member, MemberRole
from snsfeed.schemas.member import MemberCreate
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.core.db import transaction


class SQLAlchemyMemberRepository(IMemberRepository):

    def __init__(self, db: Session):
        self.db = db

    def _active_query(self):
        return self.db.query(Member).filter(Member.deleted_at.is_(None))

    def create_member(self, data: MemberCreate) -> Member:
        member = Member(
            nickname=data.nickname,
            profile_image_url=data.profile_image_url,
            class_name=data.class_name,
            role=int(data.role),
            follower_count=0,
            following_count=0,
        )
        with transaction(self.db):
            self.db.add(member)
            self.db.flush()
        return member

    def get_member(self, member_id: int) -> Optional[Member]:
        return self._active_query().filter(Member.id == member_id).first()

    def get_members(self, member_ids: Iterable[int]) -> Dict[int, Member]:
        ids = set(member_ids)
        if not ids:
            return {}
        rows = self.db.query(Member).filter(Member.id.in_(ids)).all()
        return {m.id: m for m in rows}

    def find_bot(self) -> Optional[Member]:
        return (
            self._active_query()
            .filter(Member.role == MemberRole.BOT.value)
            .order_by(Member.id.asc())
            .first()
        )
