from datetime import datetime
from types import SimpleNamespace

from snsfeed.core.pagination import CursorPage
from snsfeed.service import feed_assembler
from snsfeed.service.enrichment_svc import EnrichmentData


def _post(post_id, member_id):
    return SimpleNamespace(
        id=post_id, member_id=member_id, board_type="ALL", content=f"p{post_id}",
        youtube_url=None, youtube_summary=None, created_at=datetime(2025, 1, 1, 12, 0, post_id),
        like_count=post_id, comment_count=0,
    )


def _author(member_id, nickname):
    return SimpleNamespace(id=member_id, nickname=nickname, profile_image_url=None, class_name="JEJU_1")


def test_output_keeps_page_order_not_dict_order():
    page = CursorPage(items=[_post(9, 1), _post(7, 2), _post(3, 1)], next_cursor=3)
    alice, bob = _author(1, "alice"), _author(2, "bob")
    # built in a different order on purpose
    enrichment = {
        3: EnrichmentData(author_id=1, author=alice),
        9: EnrichmentData(author_id=1, author=alice, is_liked=True, first_image_url="https://img.test/9.png"),
        7: EnrichmentData(author_id=2, author=bob, is_followed=True),
    }

    out = feed_assembler.assemble_posts(page, enrichment)

    assert [p.id for p in out.items] == [9, 7, 3]
    assert out.count == 3
    assert out.has_next is True
    assert out.next_cursor == 3
    assert out.items[0].is_liked and out.items[0].image_url == "https://img.test/9.png"
    assert out.items[1].user.nickname == "bob" and out.items[1].user.is_followed


def test_last_page_envelope():
    out = feed_assembler.assemble_posts(CursorPage(items=[]), {})
    assert out.model_dump() == {"count": 0, "items": [], "has_next": False, "next_cursor": None}


def test_missing_author_row_gets_a_placeholder():
    info = feed_assembler.user_info(EnrichmentData(author_id=42, author=None, is_followed=True))
    assert info.id == 42
    assert info.nickname == feed_assembler.UNKNOWN_NICKNAME
    assert info.is_followed is False


def test_follow_listing_items():
    members = [_author(5, "e"), _author(6, "f")]
    enrichment = {
        5: EnrichmentData(author_id=5, author=members[0], is_followed=True),
        6: EnrichmentData(author_id=6, author=members[1]),
    }
    out = feed_assembler.assemble_follows(CursorPage(items=members, next_cursor=None), enrichment)
    assert [(u.id, u.class_name, u.is_followed) for u in out.items] == [(5, "JEJU_1", True), (6, "JEJU_1", False)]
