from typing import Dict, Optional

from sqlalchemy.orm import Session

from snsfeed.core.exceptions import MemberNotFound
from snsfeed.core.logx import logger
from snsfeed.schemas.follow import BatchFollowsOut, FollowCancel, FollowCreate, FollowOut
from snsfeed.service import counter_svc, feed_assembler
from snsfeed.service.enrichment_svc import enrich, member_self
from snsfeed.storage.counter.counter_interface import ICounterRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.member.member_interface import IMemberRepository


def _ensure_members(member_repo: IMemberRepository, follower_id: int, following_id: int) -> None:
    if not member_repo.get_member(follower_id):
        raise MemberNotFound(message=f"current member {follower_id} not found")
    if not member_repo.get_member(following_id):
        raise MemberNotFound(message=f"target member {following_id} not found")


def follow_user(
    db: Session,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    counter_repo: ICounterRepository,
    data: FollowCreate,
    to_dict: bool = True,
) -> Dict | FollowOut:
    """
    Follow a member:
    1. both members must exist
    2. following yourself -> FollowYourselfError (409), nothing changes
    3. already following -> AlreadyFollowingError (409), nothing changes
    4. insert the edge, follower.following_count +1, target.follower_count +1
    """
    _ensure_members(member_repo, data.follower_user_id, data.following_user_id)

    following_count, follower_count = counter_svc.adjust_follow(
        db, follow_repo, counter_repo, data.follower_user_id, data.following_user_id, 1
    )
    logger.info(f"[FOLLOW] {data.follower_user_id} -> {data.following_user_id}")

    out = FollowOut(
        follower_user_id=data.follower_user_id,
        following_user_id=data.following_user_id,
        following=True,
        follower_following_count=following_count or 0,
        following_follower_count=follower_count or 0,
    )
    return out.model_dump() if to_dict else out


def unfollow_user(
    db: Session,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    counter_repo: ICounterRepository,
    data: FollowCancel,
    to_dict: bool = True,
) -> Dict | FollowOut:
    """
    Unfollow; NotFollowingError when there is no edge.
    """
    _ensure_members(member_repo, data.follower_user_id, data.following_user_id)

    following_count, follower_count = counter_svc.adjust_follow(
        db, follow_repo, counter_repo, data.follower_user_id, data.following_user_id, -1
    )
    logger.info(f"[FOLLOW] {data.follower_user_id} -/-> {data.following_user_id}")

    out = FollowOut(
        follower_user_id=data.follower_user_id,
        following_user_id=data.following_user_id,
        following=False,
        follower_following_count=following_count or 0,
        following_follower_count=follower_count or 0,
    )
    return out.model_dump() if to_dict else out


def list_followers(
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    member_id: int,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchFollowsOut:
    """
    Who follows ``member_id``, oldest member id first.
    """
    if not member_repo.get_member(member_id):
        raise MemberNotFound(member_id)

    page = follow_repo.list_followers(member_id, limit=limit, cursor=cursor)
    enrichment = enrich(page.items, viewer_id, member_repo=member_repo, follow_repo=follow_repo, author_of=member_self)
    result = feed_assembler.assemble_follows(page, enrichment)
    return result.model_dump() if to_dict else result


def list_followings(
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    member_id: int,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchFollowsOut:
    """
    Who ``member_id`` follows, oldest member id first.
    """
    if not member_repo.get_member(member_id):
        raise MemberNotFound(member_id)

    page = follow_repo.list_followings(member_id, limit=limit, cursor=cursor)
    enrichment = enrich(page.items, viewer_id, member_repo=member_repo, follow_repo=follow_repo, author_of=member_self)
    result = feed_assembler.assemble_follows(page, enrichment)
    return result.model_dump() if to_dict else result
