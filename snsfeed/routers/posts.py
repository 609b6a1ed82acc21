from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from snsfeed.schemas.post import PostCreate, PostDetails, BatchPostsOut, YoutubeSummaryOut
from snsfeed.core.biz_response import BizResponse
from snsfeed.core.logx import logger
from snsfeed.service import post_svc

from snsfeed.storage.database import (
    get_db,
    get_member_repo,
    get_post_repo,
    get_follow_repo,
    get_like_repo,
    get_bot_post_trigger,
    get_youtube_summarizer,
)
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.service.bot_post_svc import BotPostTrigger
from snsfeed.service.youtube_summary_svc import YoutubeSummarizer

from snsfeed.core.exceptions import (
    NotFoundError,
    InvalidArgumentError,
    ConflictError,
    ForbiddenAction,
)

posts_router = APIRouter(prefix="/posts", tags=["posts"])


# --------------------------------- youtube summary ---------------------------------
@posts_router.get("/{post_id}/youtube-summary", response_model=YoutubeSummaryOut)
def get_youtube_summary(post_id: int, post_repo: IPostRepository = Depends(get_post_repo)):
    """
    Summary of the post's youtube video
    - 409 while it is still being generated or when generation failed
    """
    try:
        summary = post_svc.get_youtube_summary(post_repo=post_repo, post_id=post_id, to_dict=True)
        return BizResponse(data=summary)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except InvalidArgumentError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ConflictError as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except Exception as e:
        logger.exception("get_youtube_summary error")
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- create ---------------------------------
@posts_router.post("/{board_type}", response_model=PostDetails)
def create_post(
    board_type: str,
    payload: PostCreate,
    db: Session = Depends(get_db),
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    summarizer: YoutubeSummarizer = Depends(get_youtube_summarizer),
    bot_post: BotPostTrigger = Depends(get_bot_post_trigger),
):
    """
    Create a post on a board. Youtube summary and bot posts run after commit.
    """
    try:
        post = post_svc.create_post(
            db=db,
            member_repo=member_repo,
            post_repo=post_repo,
            board_type=board_type,
            data=payload,
            summarizer=summarizer,
            bot_post=bot_post,
            to_dict=True,
        )
        return BizResponse(data=post, status_code=201)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except InvalidArgumentError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- feeds ---------------------------------
@posts_router.get("/{board_type}", response_model=BatchPostsOut)
def list_board_posts(
    board_type: str,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
):
    """
    Newest-first page of a board; pass next_cursor back as cursor.
    """
    try:
        result = post_svc.list_board_posts(
            post_repo=post_repo,
            member_repo=member_repo,
            follow_repo=follow_repo,
            like_repo=like_repo,
            board_type=board_type,
            limit=limit,
            cursor=cursor,
            viewer_id=viewer_id,
            to_dict=True,
        )
        return BizResponse(data=result)
    except InvalidArgumentError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except Exception as e:
        logger.exception("list_board_posts error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/{board_type}/{post_id}", response_model=PostDetails)
def get_post(
    board_type: str,
    post_id: int,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
):
    try:
        post = post_svc.get_post_detail(
            post_repo=post_repo,
            member_repo=member_repo,
            follow_repo=follow_repo,
            like_repo=like_repo,
            post_id=post_id,
            viewer_id=viewer_id,
            to_dict=True,
        )
        return BizResponse(data=post)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("get_post error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.delete("/{board_type}/{post_id}")
def delete_post(
    board_type: str,
    post_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    Soft delete, author only
    """
    try:
        ok = post_svc.delete_post(db=db, post_repo=post_repo, post_id=post_id, member_id=member_id)
        return BizResponse(data=ok)
    except NotFoundError as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except ForbiddenAction as e:
        return BizResponse(data=False, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception("delete_post error")
        return BizResponse(data=False, msg=str(e), status_code=500)
