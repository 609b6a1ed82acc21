from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from snsfeed.core import config
from snsfeed.core.ai_client import GenerationClient
# imported for their tables
from snsfeed.models import member, post, comment, like, follow, bot_reply_claim  # noqa: F401
from snsfeed.storage.member.SQLAlchemyMemberRepository import SQLAlchemyMemberRepository
from snsfeed.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from snsfeed.storage.comment.SQLAlchemyCommentRepository import SQLAlchemyCommentRepository
from snsfeed.storage.like.SQLAlchemyLikeRepository import SQLAlchemyLikeRepository
from snsfeed.storage.follow.SQLAlchemyFollowRepository import SQLAlchemyFollowRepository
from snsfeed.storage.counter.SQLAlchemyCounterRepository import SQLAlchemyCounterRepository
from snsfeed.service.bot_reply_svc import BotReplyTrigger
from snsfeed.service.bot_post_svc import BotPostTrigger
from snsfeed.service.youtube_summary_svc import YoutubeSummarizer

# SQLAlchemy engine
engine = create_engine(config.DATABASE_URL, echo=config.SQL_ECHO, pool_pre_ping=True)
# side effects read rows after the request session closed, so keep loaded state on commit
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------- repositories ----------

def get_member_repo(db: Session = Depends(get_db)) -> SQLAlchemyMemberRepository:
    return SQLAlchemyMemberRepository(db)
def get_post_repo(db: Session = Depends(get_db)) -> SQLAlchemyPostRepository:
    return SQLAlchemyPostRepository(db)
def get_comment_repo(db: Session = Depends(get_db)) -> SQLAlchemyCommentRepository:
    return SQLAlchemyCommentRepository(db)
def get_like_repo(db: Session = Depends(get_db)) -> SQLAlchemyLikeRepository:
    return SQLAlchemyLikeRepository(db)
def get_follow_repo(db: Session = Depends(get_db)) -> SQLAlchemyFollowRepository:
    return SQLAlchemyFollowRepository(db)
def get_counter_repo(db: Session = Depends(get_db)) -> SQLAlchemyCounterRepository:
    return SQLAlchemyCounterRepository(db)


# ---------- post-commit side effects ----------

_generation_client = None


def get_generation_client() -> GenerationClient:
    global _generation_client
    if _generation_client is None:
        _generation_client = GenerationClient()
    return _generation_client


def get_bot_reply_trigger(client: GenerationClient = Depends(get_generation_client)) -> BotReplyTrigger:
    return BotReplyTrigger(session_factory=SessionLocal, client=client)
def get_bot_post_trigger(client: GenerationClient = Depends(get_generation_client)) -> BotPostTrigger:
    return BotPostTrigger(session_factory=SessionLocal, client=client)
def get_youtube_summarizer(client: GenerationClient = Depends(get_generation_client)) -> YoutubeSummarizer:
    return YoutubeSummarizer(session_factory=SessionLocal, client=client)
