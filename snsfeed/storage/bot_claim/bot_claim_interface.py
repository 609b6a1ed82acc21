from typing import Optional, Protocol

from snsfeed.models.bot_reply_claim import BotReplyClaim


class IBotClaimRepository(Protocol):

    def claim(self, comment_id: int, event_key: str) -> Optional[BotReplyClaim]:
        """
        Take the (comment_id, event_key) slot. Returns None when another
        delivery of the same event already holds it.
        """
        ...

    def attach_reply(self, claim_id: int, reply_id: int) -> None:
        ...
