import threading
from types import SimpleNamespace

import pytest

from snsfeed.core.db import TxState, current_unit_of_work, on_commit, transaction
from snsfeed.core.post_commit import SideEffectDispatcher
from snsfeed.models.member import Member, MemberRole
from snsfeed.schemas.comment import CommentCreate
from snsfeed.service import comment_svc


class Recorder:

    def __init__(self):
        self.calls = []
        self.threads = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        self.threads.append(threading.current_thread().name)


def test_side_effect_runs_after_commit_on_a_worker(db, dispatcher):
    recorder = Recorder()

    with transaction(db) as uow:
        db.add(Member(nickname="n", class_name="JEJU_1"))
        uow.on_commit(recorder, 1, key="a")
        # nothing runs while the transaction is open
        assert recorder.calls == []
        assert uow.pending_callbacks == 1

    assert dispatcher.wait_idle(timeout=5)
    assert recorder.calls == [((1,), {"key": "a"})]
    assert recorder.threads[0] != threading.current_thread().name
    assert uow.state is TxState.DISPATCHED


def test_rollback_discards_side_effects(db, dispatcher):
    recorder = Recorder()

    with pytest.raises(ValueError):
        with transaction(db) as uow:
            uow.on_commit(recorder)
            raise ValueError("write failed")

    assert dispatcher.wait_idle(timeout=5)
    assert recorder.calls == []
    assert uow.state is TxState.ROLLED_BACK
    assert uow.pending_callbacks == 0
    assert current_unit_of_work(db) is None


def test_nested_transactions_join_the_outer_one(db, dispatcher):
    recorder = Recorder()

    with transaction(db) as outer:
        with transaction(db) as inner:
            assert inner is outer
            on_commit(db, recorder, "inner")
        # the inner block ending must not fire anything
        assert outer.state is TxState.PENDING
        on_commit(db, recorder, "outer")

    dispatcher.wait_idle(timeout=5)
    assert [args for args, _ in recorder.calls] == [("inner",), ("outer",)]


def test_registration_needs_an_open_transaction(db):
    with pytest.raises(RuntimeError):
        on_commit(db, print)


def test_no_registration_after_commit(db):
    with transaction(db) as uow:
        pass
    with pytest.raises(RuntimeError):
        uow.on_commit(print)


def test_failing_side_effect_is_logged_and_isolated(db, dispatcher, caplog):
    recorder = Recorder()

    def boom():
        raise RuntimeError("generation down")

    with transaction(db) as uow:
        uow.on_commit(boom)
        uow.on_commit(recorder, "after")

    assert dispatcher.wait_idle(timeout=5)
    assert recorder.calls == [(("after",), {})]
    assert "generation down" in caplog.text


def test_side_effect_sees_committed_rows(db, dispatcher, session_factory):
    seen = []

    def read_back(member_id):
        with session_factory() as s:
            seen.append(s.get(Member, member_id).nickname)

    with transaction(db) as uow:
        m = Member(nickname="visible", class_name="JEJU_1")
        db.add(m)
        db.flush()
        uow.on_commit(read_back, m.id)

    dispatcher.wait_idle(timeout=5)
    assert seen == ["visible"]


def test_wait_idle_covers_side_effects_submitted_by_side_effects():
    d = SideEffectDispatcher(max_workers=2, name="chain")
    done = threading.Event()
    try:
        d.submit(lambda: d.submit(done.set))
        assert d.wait_idle(timeout=5)
        assert done.is_set()
    finally:
        d.shutdown()


def test_closed_dispatcher_rejects_work():
    d = SideEffectDispatcher(max_workers=1)
    d.shutdown()
    with pytest.raises(RuntimeError):
        d.submit(print)


def test_refused_dispatch_keeps_the_commit(db, session_factory, caplog):
    closed = SideEffectDispatcher(max_workers=1)
    closed.shutdown()
    first, second = Recorder(), Recorder()

    with transaction(db, dispatcher=closed) as uow:
        m = Member(nickname="kept", class_name="JEJU_1")
        db.add(m)
        db.flush()
        uow.on_commit(first)
        uow.on_commit(second)

    assert uow.state is TxState.DISPATCHED
    assert uow.pending_callbacks == 0
    assert (first.calls, second.calls) == ([], [])
    assert caplog.text.count("could not dispatch") == 2
    with session_factory() as s:
        assert s.get(Member, m.id).nickname == "kept"


def test_rolled_back_comment_schedules_no_bot_reply(db, repos, dispatcher, make_member, make_post):
    bot = make_member("bot", role=MemberRole.BOT)
    user = make_member("user")
    post = make_post(bot)
    recorder = Recorder()
    trigger = SimpleNamespace(trigger=recorder)

    # the comment write joins an outer transaction that then fails
    with pytest.raises(RuntimeError):
        with transaction(db) as uow:
            comment_svc.create_comment(
                db, repos.member, repos.post, repos.comment, repos.counter,
                post.id, CommentCreate(member_id=user.id, content="hi bot"),
                bot_reply=trigger,
            )
            assert uow.pending_callbacks == 1
            raise RuntimeError("later write failed")

    dispatcher.wait_idle(timeout=5)
    assert recorder.calls == []
    assert repos.comment.list_comments(post.id, limit=10).items == []
