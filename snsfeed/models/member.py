from sqlalchemy import Column, Integer, String, SmallInteger, TIMESTAMP, Index
from enum import IntEnum
from snsfeed.models.base import Base
from snsfeed.core.time import now_kst


class MemberRole(IntEnum):
    USER = 0    # ordinary member
    ADMIN = 1   # operator
    BOT = 2     # the social bot that writes replies and posts


class Member(Base):
    """ Members. follower_count / following_count are caches of the follows table
        and are only ever changed through the counter repository.

        CREATE TABLE IF NOT EXISTS members (
            id INT AUTO_INCREMENT PRIMARY KEY,               -- member id
            nickname VARCHAR(40) NOT NULL,                   -- display name
            profile_image_url VARCHAR(512) NULL,             -- avatar
            class_name VARCHAR(40) NULL,                     -- class label, e.g. PANGYO_1
            role SMALLINT NOT NULL DEFAULT 0,                -- 0 user / 1 admin / 2 bot
            follower_count INT NOT NULL DEFAULT 0,           -- rows in follows with following_user_id = id
            following_count INT NOT NULL DEFAULT 0,          -- rows in follows with follower_user_id = id
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            deleted_at TIMESTAMP NULL                        -- soft delete
        );

        CREATE INDEX idx_members_role ON members (role);
    """

    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nickname = Column(String(40), nullable=False)
    profile_image_url = Column(String(512), nullable=True)
    class_name = Column(String(40), nullable=True)
    role = Column(SmallInteger, nullable=False, default=MemberRole.USER.value)
    follower_count = Column(Integer, nullable=False, default=0)
    following_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_members_role", "role"),
    )

    @property
    def is_bot(self) -> bool:
        return self.role == MemberRole.BOT

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None
