from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint
from snsfeed.models.base import Base
from snsfeed.core.time import now_kst


class BotReplyClaim(Base):
    """ One row per (comment, triggering event) the bot has answered or is answering.
        The unique key makes a second delivery of the same event a no-op.

        CREATE TABLE IF NOT EXISTS bot_reply_claims (
            id INT AUTO_INCREMENT PRIMARY KEY,
            comment_id INT NOT NULL,                         -- FK -> comments.id
            event_key VARCHAR(64) NOT NULL,                  -- e.g. comment-created:42
            reply_id INT NULL,                               -- recomment written by the bot, once known
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

            CONSTRAINT uq_bot_reply_claim UNIQUE (comment_id, event_key)
        );
    """

    __tablename__ = "bot_reply_claims"

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.id"), nullable=False)
    event_key = Column(String(64), nullable=False)
    reply_id = Column(Integer, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_kst)

    __table_args__ = (
        UniqueConstraint("comment_id", "event_key", name="uq_bot_reply_claim"),
    )
