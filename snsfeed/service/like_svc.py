from typing import Dict, Optional

from sqlalchemy.orm import Session

from snsfeed.core.exceptions import (
    CommentNotFound,
    MemberNotFound,
    PostNotFound,
    RecommentNotFound,
)
from snsfeed.core.logx import logger
from snsfeed.models.like import LikeTargetType
from snsfeed.schemas.like import BatchUsersOut, LikeCancel, LikeCreate, LikeOut
from snsfeed.service import counter_svc, feed_assembler
from snsfeed.service.enrichment_svc import enrich, member_self
from snsfeed.storage.comment.comment_interface import ICommentRepository
from snsfeed.storage.counter.counter_interface import ICounterRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository


def _ensure_target(
    post_repo: IPostRepository,
    comment_repo: ICommentRepository,
    target_type: LikeTargetType,
    target_id: int,
) -> None:
    if target_type == LikeTargetType.POST:
        if not post_repo.get_post(target_id):
            raise PostNotFound(target_id)
    elif target_type == LikeTargetType.COMMENT:
        if not comment_repo.get_comment(target_id):
            raise CommentNotFound(target_id)
    elif target_type == LikeTargetType.RECOMMENT:
        if not comment_repo.get_recomment(target_id):
            raise RecommentNotFound(target_id)
    else:
        raise ValueError(f"unsupported target_type: {target_type}")


# ----------------------------- like / unlike -----------------------------

def like_target(
    db: Session,
    member_repo: IMemberRepository,
    post_repo: IPostRepository,
    comment_repo: ICommentRepository,
    like_repo: ILikeRepository,
    counter_repo: ICounterRepository,
    data: LikeCreate,
    to_dict: bool = True,
) -> Dict | LikeOut:
    """
    Like a post / comment / recomment:

    1. member and target must exist
    2. counter_svc.adjust_like(+1) inserts the like row and bumps like_count
       together; a second like raises AlreadyLikedError with no count change
    """
    if not member_repo.get_member(data.member_id):
        raise MemberNotFound(data.member_id)
    _ensure_target(post_repo, comment_repo, data.target_type, data.target_id)

    count = counter_svc.adjust_like(
        db, like_repo, counter_repo, data.target_type, data.member_id, data.target_id, 1
    )
    logger.info(
        f"Member {data.member_id} liked target_type={data.target_type.value} "
        f"target_id={data.target_id}, like_count={count}"
    )
    out = LikeOut(
        member_id=data.member_id,
        target_type=data.target_type,
        target_id=data.target_id,
        liked=True,
        like_count=count or 0,
    )
    return out.model_dump() if to_dict else out


def cancel_like(
    db: Session,
    member_repo: IMemberRepository,
    post_repo: IPostRepository,
    comment_repo: ICommentRepository,
    like_repo: ILikeRepository,
    counter_repo: ICounterRepository,
    data: LikeCancel,
    to_dict: bool = True,
) -> Dict | LikeOut:
    """
    Remove a like. NotLikedError when there is nothing to remove.
    """
    if not member_repo.get_member(data.member_id):
        raise MemberNotFound(data.member_id)
    _ensure_target(post_repo, comment_repo, data.target_type, data.target_id)

    count = counter_svc.adjust_like(
        db, like_repo, counter_repo, data.target_type, data.member_id, data.target_id, -1
    )
    logger.info(
        f"Member {data.member_id} cancel like target_type={data.target_type.value}, "
        f"target_id={data.target_id}, like_count={count}"
    )
    out = LikeOut(
        member_id=data.member_id,
        target_type=data.target_type,
        target_id=data.target_id,
        liked=False,
        like_count=count or 0,
    )
    return out.model_dump() if to_dict else out


# ----------------------------- likers -----------------------------

def list_likers(
    member_repo: IMemberRepository,
    post_repo: IPostRepository,
    comment_repo: ICommentRepository,
    like_repo: ILikeRepository,
    follow_repo: IFollowRepository,
    target_type: LikeTargetType,
    target_id: int,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchUsersOut:
    """
    Members who liked the target, newest member id first; is_followed is
    relative to the viewer.
    """
    _ensure_target(post_repo, comment_repo, target_type, target_id)

    page = like_repo.list_likers(target_type, target_id, limit=limit, cursor=cursor)
    enrichment = enrich(
        page.items, viewer_id,
        member_repo=member_repo, follow_repo=follow_repo, author_of=member_self,
    )
    result = feed_assembler.assemble_likers(page, enrichment)
    return result.model_dump() if to_dict else result
