from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Index
from snsfeed.models.base import Base
from snsfeed.core.time import now_kst


class Comment(Base):
    """ Top-level comments of a post.

        CREATE TABLE IF NOT EXISTS comments (
            id INT AUTO_INCREMENT PRIMARY KEY,
            post_id INT NOT NULL,                            -- FK -> posts.id
            member_id INT NOT NULL,                          -- author (FK -> members.id)
            content TEXT NOT NULL,
            like_count INT NOT NULL DEFAULT 0,               -- rows in comment_likes
            recomment_count INT NOT NULL DEFAULT 0,          -- live rows in recomments
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            deleted_at TIMESTAMP NULL
        );
        CREATE INDEX idx_comments_post ON comments (post_id, created_at, id);
    """

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    content = Column(Text, nullable=False)
    like_count = Column(Integer, nullable=False, default=0)
    recomment_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_comments_post", "post_id", "created_at", "id"),
    )


class Recomment(Base):
    """ Replies to a comment (one level only).

        CREATE TABLE IF NOT EXISTS recomments (
            id INT AUTO_INCREMENT PRIMARY KEY,
            comment_id INT NOT NULL,                         -- FK -> comments.id
            member_id INT NOT NULL,                          -- FK -> members.id
            content TEXT NOT NULL,
            like_count INT NOT NULL DEFAULT 0,               -- rows in recomment_likes
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            deleted_at TIMESTAMP NULL
        );
        CREATE INDEX idx_recomments_comment ON recomments (comment_id, created_at, id);
    """

    __tablename__ = "recomments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.id"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    content = Column(Text, nullable=False)
    like_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_recomments_comment", "comment_id", "created_at", "id"),
    )
