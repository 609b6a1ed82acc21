"""
Counter maintenance.

Every denormalized counter change goes through one of these functions, and
each one runs in the same transaction as the join-row insert/delete that
backs it: both commit or both roll back.
"""
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from snsfeed.core.db import transaction
from snsfeed.core.exceptions import (
    AlreadyFollowingError,
    AlreadyLikedError,
    FollowYourselfError,
    InvalidDeltaError,
    NotFollowingError,
    NotLikedError,
)
from snsfeed.core.logx import logger
from snsfeed.models.like import LikeTargetType
from snsfeed.storage.counter.counter_interface import ICounterRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository


def _check_delta(delta: int) -> None:
    if isinstance(delta, bool) or delta not in (1, -1):
        raise InvalidDeltaError(delta)


def adjust_like(
    db: Session,
    like_repo: ILikeRepository,
    counter_repo: ICounterRepository,
    target_type: LikeTargetType,
    member_id: int,
    target_id: int,
    delta: int,
) -> Optional[int]:
    """
    +1: insert the like row then bump like_count.
        - row already there -> AlreadyLikedError, counter untouched
        - concurrent insert wins after our check -> the primary key rejects
          ours, AlreadyLikedError, whole transaction rolled back
    -1: delete the like row then drop like_count.
        - no row -> NotLikedError, counter untouched

    Returns the target's like_count after the change.
    """
    _check_delta(delta)
    with transaction(db):
        if delta == 1:
            if like_repo.exists(target_type, member_id, target_id):
                raise AlreadyLikedError(member_id=member_id, target_type=target_type.value, target_id=target_id)
            like_repo.add(target_type, member_id, target_id)
        else:
            if not like_repo.remove(target_type, member_id, target_id):
                raise NotLikedError(member_id=member_id, target_type=target_type.value, target_id=target_id)
        count = counter_repo.update_like_count(target_type, target_id, delta)

    logger.debug(f"[COUNTER] {target_type.value} {target_id} like_count {delta:+d} -> {count}")
    return count


def adjust_follow(
    db: Session,
    follow_repo: IFollowRepository,
    counter_repo: ICounterRepository,
    follower_id: int,
    following_id: int,
    delta: int,
) -> Tuple[Optional[int], Optional[int]]:
    """
    Add (+1) or remove (-1) the follow edge together with
    follower.following_count and following.follower_count.

    Returns (follower's following_count, following's follower_count).
    """
    _check_delta(delta)
    if follower_id == following_id:
        raise FollowYourselfError(follower_id)

    with transaction(db):
        if delta == 1:
            if follow_repo.exists(follower_id, following_id):
                raise AlreadyFollowingError(follower_id, following_id)
            follow_repo.add(follower_id, following_id)
        else:
            if not follow_repo.remove(follower_id, following_id):
                raise NotFollowingError(follower_id, following_id)
        counts = counter_repo.update_follow_counts(follower_id, following_id, delta)

    logger.debug(f"[COUNTER] follow {follower_id}->{following_id} {delta:+d} -> {counts}")
    return counts


def adjust_reply_count(db: Session, counter_repo: ICounterRepository, comment_id: int, delta: int) -> Optional[int]:
    """comments.recomment_count; the caller inserts/deletes the recomment in the same transaction."""
    _check_delta(delta)
    with transaction(db):
        return counter_repo.update_recomment_count(comment_id, delta)


def adjust_comment_count(db: Session, counter_repo: ICounterRepository, post_id: int, delta: int) -> Optional[int]:
    """posts.comment_count; same contract as adjust_reply_count."""
    _check_delta(delta)
    with transaction(db):
        return counter_repo.update_comment_count(post_id, delta)
