from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from snsfeed.core.ai_client import GenerationClient
from snsfeed.core.exceptions import BotNotConfigured, CommentNotFound, PostNotFound
from snsfeed.core.logx import logger
from snsfeed.schemas.bot import (
    BotRecommentItem,
    BotRecommentRequest,
    BotThreadComment,
    BotThreadPost,
    BotUser,
)
from snsfeed.service import comment_svc, feed_assembler
from snsfeed.storage.bot_claim.SQLAlchemyBotClaimRepository import SQLAlchemyBotClaimRepository
from snsfeed.storage.comment.SQLAlchemyCommentRepository import SQLAlchemyCommentRepository
from snsfeed.storage.counter.SQLAlchemyCounterRepository import SQLAlchemyCounterRepository
from snsfeed.storage.member.SQLAlchemyMemberRepository import SQLAlchemyMemberRepository
from snsfeed.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository


def _bot_user(member) -> BotUser:
    if member is None:
        return BotUser(nickname=feed_assembler.UNKNOWN_NICKNAME)
    return BotUser(nickname=member.nickname, class_name=member.class_name)


class BotReplyTrigger:
    """
    Writes the bot's reply to a comment, after the comment has committed.

    Runs on the post-commit worker pool with its own sessions:

    1. load thread context (bot, post, comment, existing recomments) and
       claim (comment_id, event_key); a second delivery of the same event
       finds the claim taken and stops
    2. call the generation service, outside any transaction
    3. write the reply through comment_svc.create_recomment, which also
       bumps comments.recomment_count

    One attempt, no retries. ``trigger`` never raises.
    """

    def __init__(self, session_factory: Callable[[], Session], client: GenerationClient):
        self.session_factory = session_factory
        self.client = client

    def trigger(self, comment_id: int, event_key: Optional[str] = None) -> Optional[int]:
        try:
            return self.handle(comment_id, event_key or comment_svc.comment_created_event(comment_id))
        except Exception:
            logger.exception(f"[BOT] reply to comment {comment_id} failed")
            return None

    def handle(self, comment_id: int, event_key: str) -> Optional[int]:
        with self.session_factory() as db:
            request, bot_id = self._load_context(db, comment_id)
            claim = SQLAlchemyBotClaimRepository(db).claim(comment_id, event_key)
            if claim is None:
                logger.info(f"[BOT] {event_key} on comment {comment_id} already handled, skipping")
                return None
            claim_id = claim.id

        content = self.client.generate_recomment(request)

        with self.session_factory() as db:
            reply = comment_svc.create_recomment(
                db,
                SQLAlchemyMemberRepository(db),
                SQLAlchemyCommentRepository(db),
                SQLAlchemyCounterRepository(db),
                comment_id=comment_id,
                member_id=bot_id,
                content=content,
                to_dict=False,
            )
            SQLAlchemyBotClaimRepository(db).attach_reply(claim_id, reply.id)

        logger.info(f"[BOT] replied {reply.id} to comment {comment_id}")
        return reply.id

    def _load_context(self, db: Session, comment_id: int) -> Tuple[BotRecommentRequest, int]:
        member_repo = SQLAlchemyMemberRepository(db)
        comment_repo = SQLAlchemyCommentRepository(db)

        bot = member_repo.find_bot()
        if bot is None:
            raise BotNotConfigured()
        comment = comment_repo.get_comment(comment_id)
        if comment is None:
            raise CommentNotFound(comment_id)
        post = SQLAlchemyPostRepository(db).get_post(comment.post_id)
        if post is None:
            raise PostNotFound(comment.post_id)
        recomments = comment_repo.all_recomments(comment.id)

        members = member_repo.get_members(
            {post.member_id, comment.member_id} | {r.member_id for r in recomments}
        )

        request = BotRecommentRequest(
            board_type=post.board_type,
            post=BotThreadPost(
                id=post.id,
                user=_bot_user(members.get(post.member_id)),
                created_at=post.created_at.isoformat(),
                content=post.content,
            ),
            comment=BotThreadComment(
                id=comment.id,
                user=_bot_user(members.get(comment.member_id)),
                created_at=comment.created_at.isoformat(),
                content=comment.content,
                recomments=[
                    BotRecommentItem(
                        user=_bot_user(members.get(r.member_id)),
                        created_at=r.created_at.isoformat(),
                        content=r.content,
                    )
                    for r in recomments
                ],
            ),
        )
        return request, bot.id
