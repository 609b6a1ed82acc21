import pytest

from snsfeed.core.exceptions import InvalidArgumentError, InvalidCursorError, InvalidLimitError
from snsfeed.core.pagination import CursorPage, check_page_args
from snsfeed.models.like import LikeTargetType
from snsfeed.service import counter_svc


def _ids(page):
    return [row.id for row in page.items]


def _walk(fetch, limit):
    """Follow next_cursor until it runs out, returning every id seen."""
    seen, cursor = [], None
    while True:
        page = fetch(limit, cursor)
        seen.extend(_ids(page))
        if not page.has_next:
            return seen
        cursor = page.next_cursor


# ---------- argument checks ----------

@pytest.mark.parametrize("limit", [0, -1, None, "3", True])
def test_limit_must_be_positive_int(limit):
    with pytest.raises(InvalidLimitError):
        check_page_args(limit, None)


@pytest.mark.parametrize("cursor", [0, -5, "9", 1.5])
def test_cursor_must_be_positive_int(cursor):
    with pytest.raises(InvalidCursorError):
        check_page_args(3, cursor)


def test_invalid_limit_is_an_invalid_argument(repos):
    with pytest.raises(InvalidArgumentError):
        repos.post.list_board_posts("ALL", limit=0)


def test_no_upper_bound_on_limit(repos, make_member, make_post):
    author = make_member("a")
    for _ in range(3):
        make_post(author)
    page = repos.post.list_board_posts("ALL", limit=10_000)
    assert len(page) == 3
    assert page.next_cursor is None


def test_empty_collection():
    page = CursorPage(items=[])
    assert not page.has_next


# ---------- content feeds: newest first ----------

def test_board_listing_scenario(repos, make_member, make_post):
    author = make_member("a")
    for _ in range(7):
        make_post(author, board="JEJU_1")
    posts = [make_post(author, board="ALL") for _ in range(3)]
    assert [p.id for p in posts] == [8, 9, 10]

    first = repos.post.list_board_posts("ALL", limit=2)
    assert _ids(first) == [10, 9]
    assert first.next_cursor == 9

    second = repos.post.list_board_posts("ALL", limit=2, cursor=9)
    assert _ids(second) == [8]
    assert second.next_cursor is None
    assert not second.has_next


def test_full_last_page_still_hands_out_a_cursor(repos, make_member, make_post):
    author = make_member("a")
    for _ in range(4):
        make_post(author)

    first = repos.post.list_board_posts("ALL", limit=2)
    second = repos.post.list_board_posts("ALL", limit=2, cursor=first.next_cursor)
    third = repos.post.list_board_posts("ALL", limit=2, cursor=second.next_cursor)

    assert second.next_cursor == 1
    assert _ids(third) == []
    assert third.next_cursor is None


@pytest.mark.parametrize("limit", [1, 3, 5, 23, 50])
def test_traversal_has_no_gaps_or_duplicates(repos, make_member, make_post, limit):
    a, b = make_member("a"), make_member("b")
    expected = []
    for i in range(23):
        p = make_post(a if i % 2 else b, board="PANGYO_2")
        expected.append(p.id)
        make_post(a, board="ALL")  # other board, must not leak in

    seen = _walk(lambda n, c: repos.post.list_board_posts("PANGYO_2", limit=n, cursor=c), limit)

    assert seen == sorted(expected, reverse=True)
    assert len(set(seen)) == len(seen)


def test_inserts_at_the_front_do_not_disturb_a_started_traversal(repos, make_member, make_post):
    author = make_member("a")
    original = [make_post(author).id for _ in range(6)]

    first = repos.post.list_board_posts("ALL", limit=2)
    make_post(author)
    make_post(author)
    rest = _walk(lambda n, c: repos.post.list_board_posts("ALL", limit=n, cursor=c or first.next_cursor), 2)

    assert _ids(first) + rest == sorted(original, reverse=True)


def test_resume_from_a_cursor_whose_row_was_deleted(repos, make_member, make_post):
    author = make_member("a")
    ids = [make_post(author).id for _ in range(5)]

    first = repos.post.list_board_posts("ALL", limit=2)
    repos.post.soft_delete(first.next_cursor)

    second = repos.post.list_board_posts("ALL", limit=2, cursor=first.next_cursor)
    assert _ids(second) == [ids[2], ids[1]]


def test_soft_deleted_rows_are_excluded(repos, make_member, make_post):
    author = make_member("a")
    ids = [make_post(author).id for _ in range(3)]
    repos.post.soft_delete(ids[1])

    assert _ids(repos.post.list_board_posts("ALL", limit=10)) == [ids[2], ids[0]]


def test_member_posts_listing(repos, make_member, make_post):
    a, b = make_member("a"), make_member("b")
    mine = [make_post(a).id for _ in range(3)]
    make_post(b)

    seen = _walk(lambda n, c: repos.post.list_member_posts(a.id, limit=n, cursor=c), 2)
    assert seen == sorted(mine, reverse=True)


# ---------- relationship listings: member id ascending ----------

def test_follower_listing_is_ascending(db, repos, make_member):
    target = make_member("target")
    followers = [make_member(f"f{i}") for i in range(7)]
    for f in reversed(followers):
        counter_svc.adjust_follow(db, repos.follow, repos.counter, f.id, target.id, 1)

    first = repos.follow.list_followers(target.id, limit=3)
    assert _ids(first) == [f.id for f in followers[:3]]
    assert first.next_cursor == followers[2].id

    seen = _walk(lambda n, c: repos.follow.list_followers(target.id, limit=n, cursor=c), 3)
    assert seen == [f.id for f in followers]


def test_following_listing_is_ascending(db, repos, make_member):
    me = make_member("me")
    others = [make_member(f"o{i}") for i in range(4)]
    for o in others:
        counter_svc.adjust_follow(db, repos.follow, repos.counter, me.id, o.id, 1)

    seen = _walk(lambda n, c: repos.follow.list_followings(me.id, limit=n, cursor=c), 3)
    assert seen == [o.id for o in others]


def test_likers_listing_is_descending_by_member_id(db, repos, make_member, make_post):
    author = make_member("author")
    post = make_post(author)
    likers = [make_member(f"l{i}") for i in range(5)]
    for m in likers:
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, m.id, post.id, 1)

    seen = _walk(lambda n, c: repos.like.list_likers(LikeTargetType.POST, post.id, limit=n, cursor=c), 2)
    assert seen == sorted((m.id for m in likers), reverse=True)
