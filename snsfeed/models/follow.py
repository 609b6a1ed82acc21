from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from snsfeed.models.base import Base
from snsfeed.core.time import now_kst


class Follow(Base):
    """ Directed follow edges. A row existing is the only truth for "A follows B";
        unfollow deletes the row.

        CREATE TABLE IF NOT EXISTS follows (
            id INT AUTO_INCREMENT PRIMARY KEY,
            follower_user_id INT NOT NULL,                   -- who follows (FK -> members.id)
            following_user_id INT NOT NULL,                  -- who is followed (FK -> members.id)
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

            CONSTRAINT uq_follow_pair UNIQUE (follower_user_id, following_user_id)
        );
        CREATE INDEX idx_follows_following ON follows (following_user_id);
    """

    __tablename__ = "follows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    follower_user_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    following_user_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)

    __table_args__ = (
        UniqueConstraint("follower_user_id", "following_user_id", name="uq_follow_pair"),
        Index("idx_follows_following", "following_user_id"),
    )
