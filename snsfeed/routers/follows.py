from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from snsfeed.schemas.follow import BatchFollowsOut, FollowCreate, FollowCancel, FollowOut

from snsfeed.core.biz_response import BizResponse
from snsfeed.service import follow_svc

from snsfeed.storage.database import (
    get_db,
    get_member_repo,
    get_follow_repo,
    get_counter_repo,
)
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.counter.counter_interface import ICounterRepository
from snsfeed.core.exceptions import (
    NotFoundError,
    InvalidArgumentError,
    FollowYourselfError,
    AlreadyFollowingError,
    NotFollowingError,
)
from snsfeed.core.logx import logger

follows_router = APIRouter(prefix="/follows", tags=["follows"])


@follows_router.post("/", response_model=FollowOut)
def follow_user(
    follow: FollowCreate,
    db: Session = Depends(get_db),
    member_repo: IMemberRepository = Depends(get_member_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
):
    """
    follower_user_id follows following_user_id; both counters move with the edge
    """
    try:
        result = follow_svc.follow_user(
            db=db,
            member_repo=member_repo,
            follow_repo=follow_repo,
            counter_repo=counter_repo,
            data=follow,
            to_dict=True,
        )
        return BizResponse(data=result)
    except FollowYourselfError as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except AlreadyFollowingError as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("follow_user error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@follows_router.delete("/", response_model=FollowOut)
def cancel_follow(
    cancel_follow: FollowCancel,
    db: Session = Depends(get_db),
    member_repo: IMemberRepository = Depends(get_member_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
):
    try:
        result = follow_svc.unfollow_user(
            db=db,
            member_repo=member_repo,
            follow_repo=follow_repo,
            counter_repo=counter_repo,
            data=cancel_follow,
            to_dict=True,
        )
        return BizResponse(data=result)
    except FollowYourselfError as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except NotFollowingError as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("cancel_follow error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@follows_router.get("/following/{member_id}", response_model=BatchFollowsOut)
def list_following(
    member_id: int,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
):
    """
    Who member_id follows
    """
    try:
        result = follow_svc.list_followings(
            member_repo=member_repo,
            follow_repo=follow_repo,
            member_id=member_id,
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
        logger.exception("list_following error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@follows_router.get("/followers/{member_id}", response_model=BatchFollowsOut)
def list_followers(
    member_id: int,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
):
    """
    Who follows member_id
    """
    try:
        result = follow_svc.list_followers(
            member_repo=member_repo,
            follow_repo=follow_repo,
            member_id=member_id,
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
        logger.exception("list_followers error")
        return BizResponse(data=None, msg=str(e), status_code=500)
