from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from snsfeed.schemas.comment import CommentCreate, CommentInfo, CreateCommentOut, BatchCommentsOut, BatchRecommentsOut
from snsfeed.core.biz_response import BizResponse
from snsfeed.core.logx import logger
from snsfeed.service import comment_svc

from snsfeed.storage.database import (
    get_db,
    get_member_repo,
    get_post_repo,
    get_comment_repo,
    get_follow_repo,
    get_like_repo,
    get_counter_repo,
    get_bot_reply_trigger,
)
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository
from snsfeed.storage.comment.comment_interface import ICommentRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.storage.counter.counter_interface import ICounterRepository
from snsfeed.service.bot_reply_svc import BotReplyTrigger

from snsfeed.core.exceptions import NotFoundError, InvalidArgumentError, ForbiddenAction

comments_router = APIRouter(tags=["comments"])


# --------------------------------- create ---------------------------------
@comments_router.post("/posts/{post_id}/comments", response_model=CreateCommentOut)
def create_comment(
    post_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
    bot_reply: BotReplyTrigger = Depends(get_bot_reply_trigger),
):
    """
    Comment on a post, or reply to a comment when parent_id is set.
    A comment on a bot's post schedules a bot reply after commit.
    """
    try:
        comment = comment_svc.create_comment(
            db=db,
            member_repo=member_repo,
            post_repo=post_repo,
            comment_repo=comment_repo,
            counter_repo=counter_repo,
            post_id=post_id,
            data=payload,
            bot_reply=bot_reply,
            to_dict=True,
        )
        return BizResponse(data=comment, status_code=201)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("create_comment error")
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- reads ---------------------------------
@comments_router.get("/posts/{post_id}/comments", response_model=BatchCommentsOut)
def list_comments(
    post_id: int,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
):
    try:
        result = comment_svc.list_comments(
            post_repo=post_repo,
            comment_repo=comment_repo,
            member_repo=member_repo,
            follow_repo=follow_repo,
            like_repo=like_repo,
            post_id=post_id,
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
        logger.exception("list_comments error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@comments_router.get("/comments/{comment_id}", response_model=CommentInfo)
def get_comment(
    comment_id: int,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
):
    try:
        comment = comment_svc.get_comment_detail(
            comment_repo=comment_repo,
            member_repo=member_repo,
            follow_repo=follow_repo,
            like_repo=like_repo,
            comment_id=comment_id,
            viewer_id=viewer_id,
            to_dict=True,
        )
        return BizResponse(data=comment)
    except NotFoundError as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("get_comment error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@comments_router.get("/comments/{comment_id}/recomments", response_model=BatchRecommentsOut)
def list_recomments(
    comment_id: int,
    limit: int = 12,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    member_repo: IMemberRepository = Depends(get_member_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    like_repo: ILikeRepository = Depends(get_like_repo),
):
    try:
        result = comment_svc.list_recomments(
            comment_repo=comment_repo,
            member_repo=member_repo,
            follow_repo=follow_repo,
            like_repo=like_repo,
            comment_id=comment_id,
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
        logger.exception("list_recomments error")
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- delete ---------------------------------
@comments_router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
):
    try:
        ok = comment_svc.delete_comment(db=db, comment_repo=comment_repo, counter_repo=counter_repo, comment_id=comment_id, member_id=member_id)
        return BizResponse(data=ok)
    except NotFoundError as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except ForbiddenAction as e:
        return BizResponse(data=False, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception("delete_comment error")
        return BizResponse(data=False, msg=str(e), status_code=500)


@comments_router.delete("/recomments/{recomment_id}")
def delete_recomment(
    recomment_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    counter_repo: ICounterRepository = Depends(get_counter_repo),
):
    try:
        ok = comment_svc.delete_recomment(db=db, comment_repo=comment_repo, counter_repo=counter_repo, recomment_id=recomment_id, member_id=member_id)
        return BizResponse(data=ok)
    except NotFoundError as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except ForbiddenAction as e:
        return BizResponse(data=False, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception("delete_recomment error")
        return BizResponse(data=False, msg=str(e), status_code=500)
