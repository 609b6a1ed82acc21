import pytest

from snsfeed.core.exceptions import (
    AlreadyExistsError,
    AlreadyFollowingError,
    AlreadyLikedError,
    AlreadyRemovedError,
    CommentNotFound,
    ConflictError,
    DataIntegrityWarning,
    FollowYourselfError,
    InvalidArgumentError,
    NotFollowingError,
    NotLikedError,
    PostNotFound,
    RecommentNotFound,
)
from snsfeed.models.comment import Comment
from snsfeed.models.like import LikeTargetType, PostLike
from snsfeed.models.member import Member
from snsfeed.models.post import Post
from snsfeed.schemas.comment import CommentCreate
from snsfeed.service import comment_svc, counter_svc, post_svc


def _value(session_factory, model, row_id, column):
    with session_factory() as s:
        return getattr(s.get(model, row_id), column)


# ---------- likes ----------

def test_double_like_counts_once(db, repos, session_factory, make_member, make_post):
    author, fan = make_member("author"), make_member("fan")
    post = make_post(author)

    assert counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, fan.id, post.id, 1) == 1
    with pytest.raises(AlreadyLikedError) as exc:
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, fan.id, post.id, 1)

    assert isinstance(exc.value, AlreadyExistsError)
    assert _value(session_factory, Post, post.id, "like_count") == 1


def test_unlike_after_like_restores_the_count(db, repos, session_factory, make_member, make_post):
    author, a, b = make_member("author"), make_member("a"), make_member("b")
    post = make_post(author)
    counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, a.id, post.id, 1)
    before = _value(session_factory, Post, post.id, "like_count")

    counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, b.id, post.id, 1)
    counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, b.id, post.id, -1)

    assert _value(session_factory, Post, post.id, "like_count") == before == 1
    assert not repos.like.exists(LikeTargetType.POST, b.id, post.id)


def test_unlike_without_like(db, repos, session_factory, make_member, make_post):
    author, fan = make_member("author"), make_member("fan")
    post = make_post(author)

    with pytest.raises(NotLikedError) as exc:
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, fan.id, post.id, -1)

    assert isinstance(exc.value, AlreadyRemovedError)
    assert _value(session_factory, Post, post.id, "like_count") == 0


@pytest.mark.parametrize("target_type", [LikeTargetType.COMMENT, LikeTargetType.RECOMMENT])
def test_comment_and_recomment_likes(db, repos, session_factory, make_member, make_post, target_type):
    author, fan = make_member("author"), make_member("fan")
    post = make_post(author)
    comment = repos.comment.create_comment(post.id, author.id, "c")
    recomment = repos.comment.create_recomment(comment.id, author.id, "r")
    target = comment if target_type == LikeTargetType.COMMENT else recomment

    assert counter_svc.adjust_like(db, repos.like, repos.counter, target_type, fan.id, target.id, 1) == 1
    assert counter_svc.adjust_like(db, repos.like, repos.counter, target_type, fan.id, target.id, -1) == 0
    assert _value(session_factory, Post, post.id, "like_count") == 0


def test_lost_race_is_rejected_by_the_primary_key(db, repos, session_factory, make_member, make_post, monkeypatch):
    author, fan = make_member("author"), make_member("fan")
    post = make_post(author)

    # another request inserted the row after our existence check
    with session_factory() as other:
        other.add(PostLike(member_id=fan.id, post_id=post.id))
        other.commit()
    monkeypatch.setattr(repos.like, "exists", lambda *args: False)

    with pytest.raises(AlreadyLikedError):
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, fan.id, post.id, 1)

    assert _value(session_factory, Post, post.id, "like_count") == 0


@pytest.mark.parametrize("delta", [0, 2, -2, True])
def test_delta_must_be_one_step(db, repos, make_member, make_post, delta):
    author = make_member("author")
    post = make_post(author)
    with pytest.raises(InvalidArgumentError):
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, author.id, post.id, delta)


# ---------- follows ----------

def test_follow_and_unfollow_move_both_counters(db, repos, session_factory, make_member):
    a, b = make_member("a"), make_member("b")

    assert counter_svc.adjust_follow(db, repos.follow, repos.counter, a.id, b.id, 1) == (1, 1)
    assert _value(session_factory, Member, a.id, "following_count") == 1
    assert _value(session_factory, Member, b.id, "follower_count") == 1
    assert _value(session_factory, Member, a.id, "follower_count") == 0

    assert counter_svc.adjust_follow(db, repos.follow, repos.counter, a.id, b.id, -1) == (0, 0)
    assert not repos.follow.exists(a.id, b.id)


def test_follow_twice(db, repos, session_factory, make_member):
    a, b = make_member("a"), make_member("b")
    counter_svc.adjust_follow(db, repos.follow, repos.counter, a.id, b.id, 1)

    with pytest.raises(AlreadyFollowingError):
        counter_svc.adjust_follow(db, repos.follow, repos.counter, a.id, b.id, 1)
    assert _value(session_factory, Member, b.id, "follower_count") == 1


def test_unfollow_without_follow(db, repos, session_factory, make_member):
    a, b = make_member("a"), make_member("b")
    with pytest.raises(NotFollowingError):
        counter_svc.adjust_follow(db, repos.follow, repos.counter, a.id, b.id, -1)
    assert _value(session_factory, Member, b.id, "follower_count") == 0


def test_self_follow_is_a_conflict_and_changes_nothing(db, repos, session_factory, make_member):
    me = make_member("me")

    with pytest.raises(FollowYourselfError) as exc:
        counter_svc.adjust_follow(db, repos.follow, repos.counter, me.id, me.id, 1)

    assert isinstance(exc.value, ConflictError)
    assert _value(session_factory, Member, me.id, "follower_count") == 0
    assert _value(session_factory, Member, me.id, "following_count") == 0
    assert not repos.follow.exists(me.id, me.id)


# ---------- reply / comment counts ----------

def test_recomment_count_follows_recomment_rows(db, repos, session_factory, make_member, make_post):
    author, other = make_member("author"), make_member("other")
    post = make_post(author)
    comment = repos.comment.create_comment(post.id, author.id, "c")

    first = comment_svc.create_recomment(db, repos.member, repos.comment, repos.counter, comment.id, other.id, "r1", to_dict=False)
    comment_svc.create_recomment(db, repos.member, repos.comment, repos.counter, comment.id, author.id, "r2", to_dict=False)
    assert _value(session_factory, Comment, comment.id, "recomment_count") == 2

    comment_svc.delete_recomment(db, repos.comment, repos.counter, first.id, other.id)
    assert _value(session_factory, Comment, comment.id, "recomment_count") == 1


def test_failed_write_rolls_back_the_counter_too(db, repos, session_factory, make_member, make_post):
    from snsfeed.core.db import transaction

    author = make_member("author")
    post = make_post(author)
    comment = repos.comment.create_comment(post.id, author.id, "c")

    with pytest.raises(RuntimeError):
        with transaction(db):
            repos.comment.create_recomment(comment.id, author.id, "r")
            counter_svc.adjust_reply_count(db, repos.counter, comment.id, 1)
            raise RuntimeError("boom")

    assert _value(session_factory, Comment, comment.id, "recomment_count") == 0
    assert repos.comment.all_recomments(comment.id) == []


def test_negative_counter_is_reported_not_clamped(repos, session_factory, make_member, make_post):
    author = make_member("author")
    post = make_post(author)

    with pytest.warns(DataIntegrityWarning):
        value = repos.counter.update_like_count(LikeTargetType.POST, post.id, -1)

    assert value == -1
    assert _value(session_factory, Post, post.id, "like_count") == -1


def test_counter_on_missing_row(repos):
    assert repos.counter.update_comment_count(12345, 1) is None


# ---------- deletes ----------

def _comment(db, repos, post, member, content):
    return comment_svc.create_comment(
        db, repos.member, repos.post, repos.comment, repos.counter,
        post.id, CommentCreate(member_id=member.id, content=content), to_dict=False,
    )


def test_racing_comment_deletes_decrement_once(db, repos, session_factory, make_member, make_post, monkeypatch):
    author = make_member("author")
    post = make_post(author)
    _comment(db, repos, post, author, "kept")
    doomed = _comment(db, repos, post, author, "doomed")
    assert _value(session_factory, Post, post.id, "comment_count") == 2

    # both requests loaded the live row before either one deleted it
    stale = repos.comment.get_comment(doomed.id)
    monkeypatch.setattr(repos.comment, "get_comment", lambda comment_id: stale)

    assert comment_svc.delete_comment(db, repos.comment, repos.counter, doomed.id, author.id) is True
    with pytest.raises(CommentNotFound):
        comment_svc.delete_comment(db, repos.comment, repos.counter, doomed.id, author.id)

    assert _value(session_factory, Post, post.id, "comment_count") == 1


def test_racing_recomment_deletes_decrement_once(db, repos, session_factory, make_member, make_post, monkeypatch):
    author = make_member("author")
    post = make_post(author)
    comment = repos.comment.create_comment(post.id, author.id, "c")
    comment_svc.create_recomment(db, repos.member, repos.comment, repos.counter, comment.id, author.id, "r1", to_dict=False)
    doomed = comment_svc.create_recomment(db, repos.member, repos.comment, repos.counter, comment.id, author.id, "r2", to_dict=False)

    stale = repos.comment.get_recomment(doomed.id)
    monkeypatch.setattr(repos.comment, "get_recomment", lambda recomment_id: stale)

    comment_svc.delete_recomment(db, repos.comment, repos.counter, doomed.id, author.id)
    with pytest.raises(RecommentNotFound):
        comment_svc.delete_recomment(db, repos.comment, repos.counter, doomed.id, author.id)

    assert _value(session_factory, Comment, comment.id, "recomment_count") == 1


def test_racing_post_deletes_match_once(db, repos, make_member, make_post, monkeypatch):
    author = make_member("author")
    post = make_post(author)

    stale = repos.post.get_post(post.id)
    monkeypatch.setattr(repos.post, "get_post", lambda post_id: stale)

    assert post_svc.delete_post(db, repos.post, post.id, author.id) is True
    with pytest.raises(PostNotFound):
        post_svc.delete_post(db, repos.post, post.id, author.id)
    # the second attempt does not move the timestamp
    assert repos.post.soft_delete(post.id) is False
