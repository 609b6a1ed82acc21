"""
Batch enrichment: viewer-relative state for a whole page in a fixed number
of queries, whatever the page length.

    1. members     authors of the page + the viewer, one IN query
    2. likes       which items the viewer liked, one IN query
    3. follows     which authors the viewer follows, one IN query
    4. images      first image per post, one IN query

An anonymous viewer (or one whose account no longer exists) skips 2 and 3.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from snsfeed.core.logx import logger
from snsfeed.models.like import LikeTargetType
from snsfeed.models.member import Member
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository


@dataclass
class EnrichmentData:
    author_id: int
    author: Optional[Member]
    is_mine: bool = False
    is_liked: bool = False
    is_followed: bool = False
    first_image_url: Optional[str] = None


def _item_id(item) -> int:
    return item.id


def _author_id(item) -> int:
    return item.member_id


def member_self(item) -> int:
    """author_of for listings whose items are members themselves"""
    return item.id


def resolve_viewer(members: Dict[int, Member], viewer_id: Optional[int]) -> Optional[int]:
    if viewer_id is None:
        return None
    viewer = members.get(viewer_id)
    if viewer is None or viewer.deleted_at is not None:
        logger.debug(f"[ENRICH] viewer {viewer_id} is not a live member, treating as anonymous")
        return None
    return viewer_id


def enrich(
    items: Sequence[Any],
    viewer_id: Optional[int],
    *,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: Optional[ILikeRepository] = None,
    target_type: Optional[LikeTargetType] = None,
    post_repo: Optional[IPostRepository] = None,
    author_of: Callable[[Any], int] = _author_id,
    id_of: Callable[[Any], int] = _item_id,
) -> Dict[int, EnrichmentData]:
    """
    Map item id -> EnrichmentData for a page of already fetched rows.

    - like_repo + target_type: compute is_liked
    - post_repo: compute first_image_url (posts only)
    - author_of: how to read the author id off an item (``member_self`` for
      follower / liker listings, where is_followed is about the listed member)
    """
    if not items:
        return {}

    item_ids = [id_of(i) for i in items]
    author_ids = {author_of(i) for i in items}

    lookup_ids = set(author_ids)
    if viewer_id is not None:
        lookup_ids.add(viewer_id)
    members = member_repo.get_members(lookup_ids)

    viewer = resolve_viewer(members, viewer_id)

    liked_ids: Iterable[int] = set()
    if viewer is not None and like_repo is not None and target_type is not None:
        liked_ids = like_repo.liked_target_ids(target_type, viewer, item_ids)

    followed_ids: Iterable[int] = set()
    others = author_ids - {viewer}
    if viewer is not None and others:
        followed_ids = follow_repo.followed_ids(viewer, others)

    first_images: Dict[int, str] = {}
    if post_repo is not None:
        first_images = post_repo.first_image_urls(item_ids)

    result: Dict[int, EnrichmentData] = {}
    for item in items:
        item_id = id_of(item)
        author_id = author_of(item)
        result[item_id] = EnrichmentData(
            author_id=author_id,
            author=members.get(author_id),
            is_mine=viewer is not None and viewer == author_id,
            is_liked=item_id in liked_ids,
            is_followed=author_id in followed_ids,
            first_image_url=first_images.get(item_id),
        )
    return result
