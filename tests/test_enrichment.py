import pytest

from snsfeed.models.like import LikeTargetType
from snsfeed.service import counter_svc
from snsfeed.service.enrichment_svc import enrich, member_self


def _enrich_posts(repos, items, viewer_id):
    return enrich(
        items, viewer_id,
        member_repo=repos.member, follow_repo=repos.follow,
        like_repo=repos.like, target_type=LikeTargetType.POST, post_repo=repos.post,
    )


@pytest.fixture
def feed(db, repos, make_member, make_post):
    """viewer follows alice, likes two of her posts; bob is not followed."""
    viewer = make_member("viewer")
    alice = make_member("alice")
    bob = make_member("bob")
    posts = [
        make_post(alice),
        make_post(bob),
        make_post(viewer),
        make_post(alice),
    ]
    repos.post.add_image(posts[0].id, "https://img.test/second.png", sort_index=1)
    repos.post.add_image(posts[0].id, "https://img.test/first.png", sort_index=0)
    repos.post.add_image(posts[2].id, "https://img.test/mine.png", sort_index=0)

    counter_svc.adjust_follow(db, repos.follow, repos.counter, viewer.id, alice.id, 1)
    counter_svc.adjust_follow(db, repos.follow, repos.counter, bob.id, viewer.id, 1)
    for p in (posts[0], posts[3]):
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, viewer.id, p.id, 1)
    counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, bob.id, posts[1].id, 1)

    return viewer, alice, bob, posts


def test_empty_page_issues_no_query(repos, queries):
    with queries.capture():
        result = _enrich_posts(repos, [], viewer_id=1)
    assert result == {}
    assert queries.count == 0


def test_flags_for_a_known_viewer(repos, feed):
    viewer, alice, bob, posts = feed

    result = _enrich_posts(repos, posts, viewer.id)

    assert [result[p.id].is_liked for p in posts] == [True, False, False, True]
    assert [result[p.id].is_followed for p in posts] == [True, False, False, True]
    assert [result[p.id].is_mine for p in posts] == [False, False, True, False]
    assert result[posts[0].id].first_image_url == "https://img.test/first.png"
    assert result[posts[1].id].first_image_url is None
    assert result[posts[2].id].first_image_url == "https://img.test/mine.png"
    assert result[posts[1].id].author.nickname == "bob"


def test_follow_is_directional(repos, feed):
    viewer, alice, bob, posts = feed
    # bob follows viewer, but viewer does not follow bob
    result = _enrich_posts(repos, [posts[1]], viewer.id)
    assert result[posts[1].id].is_followed is False


def test_anonymous_viewer(repos, feed, queries):
    _, _, _, posts = feed

    with queries.capture():
        result = _enrich_posts(repos, posts, None)

    for p in posts:
        data = result[p.id]
        assert (data.is_liked, data.is_followed, data.is_mine) == (False, False, False)
    assert queries.touching("post_likes") == []
    assert queries.touching("follows") == []
    # authors + first images
    assert queries.count == 2


def test_stale_viewer_degrades_to_anonymous(repos, feed, queries):
    _, _, _, posts = feed

    with queries.capture():
        result = _enrich_posts(repos, posts, viewer_id=987654)

    assert not any(d.is_liked or d.is_followed or d.is_mine for d in result.values())
    assert queries.touching("post_likes") == []
    assert queries.touching("follows") == []


def test_soft_deleted_viewer_degrades_to_anonymous(db, repos, feed):
    viewer, _, _, posts = feed
    viewer.deleted_at = viewer.created_at
    db.commit()

    result = _enrich_posts(repos, posts, viewer.id)
    assert not any(d.is_liked or d.is_followed for d in result.values())


def test_no_follow_query_when_viewer_is_the_only_author(repos, feed, queries):
    viewer, _, _, posts = feed

    with queries.capture():
        result = _enrich_posts(repos, [posts[2]], viewer.id)

    assert result[posts[2].id].is_mine
    assert queries.touching("follows") == []


@pytest.mark.parametrize("size", [1, 12, 100])
def test_query_count_does_not_depend_on_page_size(repos, make_member, make_post, db, queries, size):
    viewer = make_member("viewer")
    authors = [make_member(f"author{i}") for i in range(5)]
    for a in authors[:3]:
        counter_svc.adjust_follow(db, repos.follow, repos.counter, viewer.id, a.id, 1)
    posts = [make_post(authors[i % len(authors)]) for i in range(size)]
    for p in posts[::3]:
        counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, viewer.id, p.id, 1)

    with queries.capture():
        _enrich_posts(repos, posts, viewer.id)

    # members, likes, follows, first images
    assert queries.count == 4


def test_member_listing_uses_the_member_itself(repos, feed):
    viewer, alice, bob, _ = feed

    result = enrich(
        [alice, bob, viewer], viewer.id,
        member_repo=repos.member, follow_repo=repos.follow, author_of=member_self,
    )

    assert result[alice.id].is_followed is True
    assert result[bob.id].is_followed is False
    assert result[viewer.id].is_mine is True
    assert result[viewer.id].is_followed is False


def test_comment_likes_are_resolved_against_comment_likes(db, repos, make_member, make_post):
    viewer, author = make_member("viewer"), make_member("author")
    post = make_post(author)
    c1 = repos.comment.create_comment(post.id, author.id, "one")
    c2 = repos.comment.create_comment(post.id, author.id, "two")
    counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.COMMENT, viewer.id, c2.id, 1)
    # a post like with the same numeric id must not count
    counter_svc.adjust_like(db, repos.like, repos.counter, LikeTargetType.POST, viewer.id, post.id, 1)

    result = enrich(
        [c1, c2], viewer.id,
        member_repo=repos.member, follow_repo=repos.follow,
        like_repo=repos.like, target_type=LikeTargetType.COMMENT,
    )
    assert result[c1.id].is_liked is False
    assert result[c2.id].is_liked is True
