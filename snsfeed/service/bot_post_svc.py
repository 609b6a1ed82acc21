from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from snsfeed.core import config
from snsfeed.core.ai_client import GenerationClient
from snsfeed.core.exceptions import BotNotConfigured
from snsfeed.core.logx import logger
from snsfeed.models.post import BoardType
from snsfeed.schemas.bot import BotPostItem, BotPostRequest, BotUser
from snsfeed.schemas.post import PostCreate
from snsfeed.service import post_svc
from snsfeed.storage.member.SQLAlchemyMemberRepository import SQLAlchemyMemberRepository
from snsfeed.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository


class BotPostTrigger:
    """
    After every BOT_POST_EVERY non-bot posts on a board, the bot writes a post
    of its own based on the latest ones.

    Reads the BOT_POST_SCAN newest posts, keeps the BOT_POST_CONTEXT newest
    written by non-bot members, sends them oldest first to the generation
    service and stores the answer as a bot post.
    """

    def __init__(self, session_factory: Callable[[], Session], client: GenerationClient):
        self.session_factory = session_factory
        self.client = client

    def trigger(self, board_type: str) -> Optional[int]:
        try:
            return self.handle(board_type)
        except Exception:
            logger.exception(f"[BOT] bot post on {board_type} failed")
            return None

    def handle(self, board_type: str) -> Optional[int]:
        with self.session_factory() as db:
            loaded = self._load_context(db, BoardType.parse(board_type))
        if loaded is None:
            return None
        request, bot_id = loaded

        result = self.client.generate_post(request)
        board = BoardType.parse(result.board_type)

        with self.session_factory() as db:
            post = post_svc.create_post(
                db,
                SQLAlchemyMemberRepository(db),
                SQLAlchemyPostRepository(db),
                board.value,
                PostCreate(member_id=bot_id, content=result.content),
                to_dict=False,
            )
        logger.info(f"[BOT] wrote post {post.id} on {board.value}")
        return post.id

    def _load_context(self, db: Session, board: BoardType) -> Optional[Tuple[BotPostRequest, int]]:
        member_repo = SQLAlchemyMemberRepository(db)
        bot = member_repo.find_bot()
        if bot is None:
            raise BotNotConfigured()

        page = SQLAlchemyPostRepository(db).list_board_posts(board.value, limit=config.BOT_POST_SCAN)
        members = member_repo.get_members({p.member_id for p in page.items})

        recent = []
        for post in page.items:
            author = members.get(post.member_id)
            if author is None or author.is_bot:
                continue
            recent.append((post, author))
            if len(recent) == config.BOT_POST_CONTEXT:
                break

        if len(recent) < config.BOT_POST_CONTEXT:
            logger.warning(f"[BOT] only {len(recent)} non-bot posts on {board.value}, skipping bot post")
            return None

        recent.reverse()
        request = BotPostRequest(
            board_type=board.value,
            posts=[
                BotPostItem(
                    user=BotUser(nickname=author.nickname, class_name=author.class_name),
                    created_at=post.created_at.isoformat(),
                    content=post.content,
                )
                for post, author in recent
            ],
        )
        return request, bot.id
