from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index
from enum import Enum
from snsfeed.models.base import Base
from snsfeed.core.time import now_kst
from snsfeed.core.exceptions import InvalidBoardType


class BoardType(str, Enum):
    """Feed partition. ALL is the shared board every class can see."""

    ALL = "ALL"
    PANGYO_1 = "PANGYO_1"
    PANGYO_2 = "PANGYO_2"
    JEJU_1 = "JEJU_1"
    JEJU_2 = "JEJU_2"
    JEJU_3 = "JEJU_3"

    @classmethod
    def parse(cls, value: str) -> "BoardType":
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidBoardType(value) from None


class YoutubeSummaryStatus(str, Enum):
    """Markers stored in posts.youtube_summary while no real summary exists."""

    IN_PROGRESS = "IN_PROGRESS"
    FAILED = "FAILED"


class Post(Base):
    """ Posts of a board.

        CREATE TABLE IF NOT EXISTS posts (
            id INT AUTO_INCREMENT PRIMARY KEY,
            member_id INT NOT NULL,                          -- author (FK -> members.id)
            board_type VARCHAR(20) NOT NULL,                 -- feed partition
            content TEXT NOT NULL,
            youtube_url VARCHAR(512) NULL,
            youtube_summary TEXT NULL,                       -- summary, or IN_PROGRESS / FAILED
            like_count INT NOT NULL DEFAULT 0,               -- rows in post_likes
            comment_count INT NOT NULL DEFAULT 0,            -- live rows in comments
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            deleted_at TIMESTAMP NULL,

            FOREIGN KEY (member_id) REFERENCES members(id)
        );

        -- board feed: WHERE board_type = ? AND deleted_at IS NULL ORDER BY created_at DESC, id DESC
        CREATE INDEX idx_posts_board_created ON posts (board_type, created_at, id);
        CREATE INDEX idx_posts_member ON posts (member_id);
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    board_type = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    youtube_url = Column(String(512), nullable=True)
    youtube_summary = Column(Text, nullable=True)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_posts_board_created", "board_type", "created_at", "id"),
        Index("idx_posts_member", "member_id"),
    )


class PostImage(Base):
    """ Images attached to a post; the first image is the lowest sort_index.

        CREATE TABLE IF NOT EXISTS post_images (
            id INT AUTO_INCREMENT PRIMARY KEY,
            post_id INT NOT NULL,                            -- FK -> posts.id
            sort_index INT NOT NULL DEFAULT 0,
            img_url VARCHAR(512) NOT NULL,

            FOREIGN KEY (post_id) REFERENCES posts(id)
        );
        CREATE INDEX idx_post_images_post ON post_images (post_id, sort_index);
    """

    __tablename__ = "post_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    sort_index = Column(Integer, nullable=False, default=0)
    img_url = Column(String(512), nullable=False)

    __table_args__ = (
        Index("idx_post_images_post", "post_id", "sort_index"),
    )
