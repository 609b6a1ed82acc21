from typing import Optional

from fastapi import APIRouter, Depends

from snsfeed.schemas.member import MemberCreate, MemberProfileOut
from snsfeed.schemas.post import BatchPostsOut
from snsfeed.core.biz_response import BizResponse
from snsfeed.core.logx import logger
from snsfeed.service import member_svc, post_svc

from snsfeed.storage.database import (
    get_member_repo,
    get_post_repo,
    get_follow_repo,
    get_like_repo,
)
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.core.exceptions import NotFoundError, InvalidArgumentError

members_router = APIRouter(prefix="/members", tags=["members"])


@members_router.post("/", response_model=MemberProfileOut)
def create_member(data: MemberCreate, member_repo: IMemberRepository = Depends(get_member_repo)):
    try:
        member = member_svc.create_member(member_repo=member_repo, data=data, to_dict=True)
        return BizResponse(data=member, status_code=201)
    except Exception as e:
        logger.exception("create_member error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@members_router.get("/{member_id}", response_model=MemberProfileOut)
def get_member_profile(
    member_id: int,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
):
    try:
        profile = member_svc.get_member_profile(
            member_repo=member_repo,
            follow_repo=follow_repo,
            member_id=member_id,
            viewer_id=viewer_id,
            to_dict=True,
        )
        return BizResponse(data=profile)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("get_member_profile error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@members_router.get("/{member_id}/posts", response_model=BatchPostsOut)
def list_member_posts(
    member_id: int,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
):
    """
    Posts written by member_id, newest first
    """
    try:
        result = post_svc.list_member_posts(
            post_repo=post_repo,
            member_repo=member_repo,
            follow_repo=follow_repo,
            like_repo=like_repo,
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
        logger.exception("list_member_posts error")
        return BizResponse(data=None, msg=str(e), status_code=500)
