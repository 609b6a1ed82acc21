from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import synonym
from enum import Enum
from snsfeed.models.base import Base
from snsfeed.core.time import now_kst


class LikeTargetType(str, Enum):
    POST = "POST"
    COMMENT = "COMMENT"
    RECOMMENT = "RECOMMENT"


# One join table per target. The composite primary key (member_id, <target>_id)
# is what stops a member from liking the same thing twice; rows are inserted on
# like and deleted on unlike, never updated.

class PostLike(Base):
    """ CREATE TABLE IF NOT EXISTS post_likes (
            member_id INT NOT NULL,                          -- FK -> members.id
            post_id INT NOT NULL,                            -- FK -> posts.id
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (member_id, post_id)
        );
        CREATE INDEX idx_post_likes_post ON post_likes (post_id, member_id);
    """

    __tablename__ = "post_likes"

    member_id = Column(Integer, ForeignKey("members.id"), primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id"), primary_key=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)

    target_id = synonym("post_id")

    __table_args__ = (
        Index("idx_post_likes_post", "post_id", "member_id"),
    )


class CommentLike(Base):
    """ CREATE TABLE IF NOT EXISTS comment_likes (
            member_id INT NOT NULL,
            comment_id INT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (member_id, comment_id)
        );
    """

    __tablename__ = "comment_likes"

    member_id = Column(Integer, ForeignKey("members.id"), primary_key=True)
    comment_id = Column(Integer, ForeignKey("comments.id"), primary_key=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)

    target_id = synonym("comment_id")

    __table_args__ = (
        Index("idx_comment_likes_comment", "comment_id", "member_id"),
    )


class RecommentLike(Base):
    """ CREATE TABLE IF NOT EXISTS recomment_likes (
            member_id INT NOT NULL,
            recomment_id INT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (member_id, recomment_id)
        );
    """

    __tablename__ = "recomment_likes"

    member_id = Column(Integer, ForeignKey("members.id"), primary_key=True)
    recomment_id = Column(Integer, ForeignKey("recomments.id"), primary_key=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)

    target_id = synonym("recomment_id")

    __table_args__ = (
        Index("idx_recomment_likes_recomment", "recomment_id", "member_id"),
    )


LIKE_MODELS = {
    LikeTargetType.POST: PostLike,
    LikeTargetType.COMMENT: CommentLike,
    LikeTargetType.RECOMMENT: RecommentLike,
}
