from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from snsfeed.schemas.like import LikeCreate, LikeCancel, LikeOut, BatchUsersOut
from snsfeed.models.like import LikeTargetType

from snsfeed.core.biz_response import BizResponse
from snsfeed.core.logx import logger

from snsfeed.service import like_svc

from snsfeed.storage.database import (
    get_db,
    get_member_repo,
    get_post_repo,
    get_comment_repo,
    get_like_repo,
    get_follow_repo,
    get_counter_repo,
)
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository
from snsfeed.storage.comment.comment_interface import ICommentRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.counter.counter_interface import ICounterRepository

from snsfeed.core.exceptions import (
    NotFoundError,
    InvalidArgumentError,
    AlreadyLikedError,
    NotLikedError,
)

likes_router = APIRouter(prefix="/likes", tags=["likes"])


# -------------------------- like -------------------------- #

@likes_router.post("/", response_model=LikeOut)
def like_target(
    data: LikeCreate,
    db: Session = Depends(get_db),
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
):
    """
    Like a post / comment / recomment; like_count moves with the like row.
    """
    try:
        like = like_svc.like_target(
            db=db,
            member_repo=member_repo,
            post_repo=post_repo,
            comment_repo=comment_repo,
            like_repo=like_repo,
            counter_repo=counter_repo,
            data=data,
            to_dict=True,
        )
        return BizResponse(data=like)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except AlreadyLikedError as e:
        logger.info(f"AlreadyLikedError: {e}")
        return BizResponse(data=None, msg=str(e), status_code=409)
    except Exception as e:
        logger.exception("like_target error")
        return BizResponse(data=None, msg=str(e), status_code=500)


# -------------------------- unlike -------------------------- #

@likes_router.post("/cancel", response_model=LikeOut)
def cancel_like(
    data: LikeCancel,
    db: Session = Depends(get_db),
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
):
    try:
        like = like_svc.cancel_like(
            db=db,
            member_repo=member_repo,
            post_repo=post_repo,
            comment_repo=comment_repo,
            like_repo=like_repo,
            counter_repo=counter_repo,
            data=data,
            to_dict=True,
        )
        return BizResponse(data=like)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except NotLikedError as e:
        logger.info(f"NotLikedError: {e}")
        return BizResponse(data=None, msg=str(e), status_code=409)
    except Exception as e:
        logger.exception("cancel_like error")
        return BizResponse(data=None, msg=str(e), status_code=500)


# -------------------------- likers -------------------------- #

@likes_router.get("/{target_type}/{target_id}", response_model=BatchUsersOut)
def list_likers(
    target_type: LikeTargetType,
    target_id: int,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
):
    """
    Members who liked the target, newest member id first
    """
    try:
        result = like_svc.list_likers(
            member_repo=member_repo,
            post_repo=post_repo,
            comment_repo=comment_repo,
            like_repo=like_repo,
            follow_repo=follow_repo,
            target_type=target_type,
            target_id=target_id,
            limit=limit,
            cursor=cursor,
            viewer_id=viewer_id,
            to_dict=True,
        )
        return BizResponse(data=result)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except InvalidArgumentError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except Exception as e:
        logger.exception("list_likers error")
        return BizResponse(data=None, msg=str(e), status_code=500)
