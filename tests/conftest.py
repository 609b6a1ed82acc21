import json
from contextlib import contextmanager
from dataclasses import dataclass

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from snsfeed.core.ai_client import GenerationClient
from snsfeed.core.post_commit import SideEffectDispatcher, set_dispatcher
from snsfeed.models.base import Base
# imported for their tables
from snsfeed.models import member, post, comment, like, follow, bot_reply_claim  # noqa: F401
from snsfeed.models.member import MemberRole
from snsfeed.schemas.member import MemberCreate
from snsfeed.storage.member.SQLAlchemyMemberRepository import SQLAlchemyMemberRepository
from snsfeed.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from snsfeed.storage.comment.SQLAlchemyCommentRepository import SQLAlchemyCommentRepository
from snsfeed.storage.like.SQLAlchemyLikeRepository import SQLAlchemyLikeRepository
from snsfeed.storage.follow.SQLAlchemyFollowRepository import SQLAlchemyFollowRepository
from snsfeed.storage.counter.SQLAlchemyCounterRepository import SQLAlchemyCounterRepository


@pytest.fixture
def engine(tmp_path):
    # a file database so that side effects on worker threads get their own connections
    engine = create_engine(
        f"sqlite:///{tmp_path / 'snsfeed.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def dispatcher():
    """A fresh single-worker dispatcher per test; wait_idle() before asserting on side effects."""
    d = SideEffectDispatcher(max_workers=1, name="test-post-commit")
    previous = set_dispatcher(d)
    try:
        yield d
    finally:
        d.shutdown(wait=True)
        set_dispatcher(previous)


@dataclass
class Repos:
    member: SQLAlchemyMemberRepository
    post: SQLAlchemyPostRepository
    comment: SQLAlchemyCommentRepository
    like: SQLAlchemyLikeRepository
    follow: SQLAlchemyFollowRepository
    counter: SQLAlchemyCounterRepository


@pytest.fixture
def repos(db):
    return Repos(
        member=SQLAlchemyMemberRepository(db),
        post=SQLAlchemyPostRepository(db),
        comment=SQLAlchemyCommentRepository(db),
        like=SQLAlchemyLikeRepository(db),
        follow=SQLAlchemyFollowRepository(db),
        counter=SQLAlchemyCounterRepository(db),
    )


@pytest.fixture
def make_member(repos):
    def _make(nickname="member", role=MemberRole.USER, class_name="PANGYO_1"):
        return repos.member.create_member(
            MemberCreate(nickname=nickname, role=role, class_name=class_name, profile_image_url=f"https://img.test/{nickname}.png")
        )
    return _make


@pytest.fixture
def make_post(repos):
    def _make(author, board="ALL", content=None):
        return repos.post.create_post(author.id, board, content or f"post by {author.nickname}")
    return _make


# ---------- query counting ----------

class QueryCounter:

    def __init__(self):
        self.statements = []
        self._active = False

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if self._active:
            self.statements.append(statement)

    @contextmanager
    def capture(self):
        self.statements = []
        self._active = True
        try:
            yield self
        finally:
            self._active = False

    @property
    def count(self) -> int:
        return len(self.statements)

    def touching(self, table: str):
        return [s for s in self.statements if table in s]


@pytest.fixture
def queries(engine):
    counter = QueryCounter()
    event.listen(engine, "before_cursor_execute", counter)
    try:
        yield counter
    finally:
        event.remove(engine, "before_cursor_execute", counter)


# ---------- generation service ----------

class FakeAiServer:
    """Canned responses per path, records every request body."""

    def __init__(self):
        self.requests = []
        self.responses = {}

    def respond(self, path, payload, status=200):
        self.responses[path] = (status, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.url.path, body))
        if request.url.path not in self.responses:
            return httpx.Response(404, json={"message": "not found"})
        status, payload = self.responses[request.url.path]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    def bodies(self, path):
        return [b for p, b in self.requests if p == path]


@pytest.fixture
def ai_server():
    return FakeAiServer()


@pytest.fixture
def ai_client(ai_server):
    client = GenerationClient(base_url="http://ai.test", timeout=5, transport=httpx.MockTransport(ai_server.handler))
    try:
        yield client
    finally:
        client.close()
