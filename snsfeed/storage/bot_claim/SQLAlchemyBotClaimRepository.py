from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.models.bot_reply_claim import BotReplyClaim
from snsfeed.storage.bot_claim.bot_claim_interface import IBotClaimRepository


class SQLAlchemyBotClaimRepository(IBotClaimRepository):

    def __init__(self, db: Session):
        self.db = db

    def claim(self, comment_id: int, event_key: str) -> Optional[BotReplyClaim]:
        row = BotReplyClaim(comment_id=comment_id, event_key=event_key)
        try:
            with transaction(self.db):
                self.db.add(row)
                self.db.flush()
        except IntegrityError:
            return None
        return row

    def attach_reply(self, claim_id: int, reply_id: int) -> None:
        with transaction(self.db):
            self.db.query(BotReplyClaim).filter(BotReplyClaim.id == claim_id).update(
                {BotReplyClaim.reply_id: reply_id}, synchronize_session="fetch"
            )
