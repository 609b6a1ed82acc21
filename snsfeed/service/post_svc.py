from typing import Dict, Optional

from sqlalchemy.orm import Session

from snsfeed.core import config
from snsfeed.core.db import on_commit, transaction
from snsfeed.core.exceptions import (
    ForbiddenAction,
    MemberNotFound,
    PostNotFound,
    YoutubeSummaryFailed,
    YoutubeSummaryInProgress,
    YoutubeUrlMissing,
)
from snsfeed.core.logx import logger
from snsfeed.models.like import LikeTargetType
from snsfeed.models.post import BoardType, YoutubeSummaryStatus
from snsfeed.schemas.member import UserInfoWithFollowing
from snsfeed.schemas.post import BatchPostsOut, PostCreate, PostDetails, YoutubeSummaryOut
from snsfeed.service import feed_assembler
from snsfeed.service.enrichment_svc import enrich
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository


# ----------------------------- create / delete -----------------------------

def create_post(
    db: Session,
    member_repo: IMemberRepository,
    post_repo: IPostRepository,
    board_type: str,
    data: PostCreate,
    summarizer=None,
    bot_post=None,
    to_dict: bool = True,
) -> Dict | PostDetails:
    """
    Create a post:

    1. board type and author must be valid
    2. insert the post (counters at zero) and, when image_url is given, its
       first image at sort index 0
    3. youtube_url + summarizer: summary starts as IN_PROGRESS and the
       summarizer is registered to run after commit
    4. bot_post: every BOT_POST_EVERY non-bot posts on the board, the bot
       post trigger is registered to run after commit
    """
    board = BoardType.parse(board_type)
    member = member_repo.get_member(data.member_id)
    if not member:
        raise MemberNotFound(data.member_id)

    summarize = bool(data.youtube_url) and summarizer is not None

    with transaction(db):
        post = post_repo.create_post(
            member_id=member.id,
            board_type=board.value,
            content=data.content,
            youtube_url=data.youtube_url,
            youtube_summary=YoutubeSummaryStatus.IN_PROGRESS.value if summarize else None,
        )
        if data.image_url:
            post_repo.add_image(post.id, data.image_url, sort_index=0)

        if summarize:
            on_commit(db, summarizer.trigger, post.id)

        if bot_post is not None and not member.is_bot:
            non_bot_posts = post_repo.count_board_non_bot_posts(board.value)
            if non_bot_posts > 0 and non_bot_posts % config.BOT_POST_EVERY == 0:
                on_commit(db, bot_post.trigger, board.value)

    logger.info(f"[POST] member {member.id} created post {post.id} on {board.value}")

    details = PostDetails(
        id=post.id,
        board_type=post.board_type,
        user=UserInfoWithFollowing(
            id=member.id,
            nickname=member.nickname,
            image_url=member.profile_image_url,
            is_followed=False,
        ),
        content=post.content,
        image_url=data.image_url,
        youtube_url=post.youtube_url,
        youtube_summary=post.youtube_summary,
        created_at=post.created_at,
        like_count=0,
        comment_count=0,
        is_mine=True,
        is_liked=False,
    )
    return details.model_dump() if to_dict else details


def delete_post(db: Session, post_repo: IPostRepository, post_id: int, member_id: int) -> bool:
    """Soft delete; only the author may do it."""
    post = post_repo.get_post(post_id)
    if not post:
        raise PostNotFound(post_id)
    if post.member_id != member_id:
        raise ForbiddenAction(f"member {member_id} cannot delete post {post_id}")

    with transaction(db):
        if not post_repo.soft_delete(post_id):
            raise PostNotFound(post_id)
    logger.info(f"[POST] member {member_id} deleted post {post_id}")
    return True


# ----------------------------- reads -----------------------------

def get_post_detail(
    post_repo: IPostRepository,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: ILikeRepository,
    post_id: int,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | PostDetails:
    post = post_repo.get_post(post_id)
    if not post:
        raise PostNotFound(post_id)

    enrichment = enrich(
        [post], viewer_id,
        member_repo=member_repo, follow_repo=follow_repo,
        like_repo=like_repo, target_type=LikeTargetType.POST, post_repo=post_repo,
    )
    details = feed_assembler.post_details(post, enrichment[post.id])
    return details.model_dump() if to_dict else details


def list_board_posts(
    post_repo: IPostRepository,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: ILikeRepository,
    board_type: str,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchPostsOut:
    """
    Newest-first page of a board. Pass ``next_cursor`` back as ``cursor``.
    """
    board = BoardType.parse(board_type)
    page = post_repo.list_board_posts(board.value, limit=limit, cursor=cursor)
    enrichment = enrich(
        page.items, viewer_id,
        member_repo=member_repo, follow_repo=follow_repo,
        like_repo=like_repo, target_type=LikeTargetType.POST, post_repo=post_repo,
    )
    result = feed_assembler.assemble_posts(page, enrichment)
    return result.model_dump() if to_dict else result


def list_member_posts(
    post_repo: IPostRepository,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: ILikeRepository,
    member_id: int,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchPostsOut:
    if not member_repo.get_member(member_id):
        raise MemberNotFound(member_id)

    page = post_repo.list_member_posts(member_id, limit=limit, cursor=cursor)
    enrichment = enrich(
        page.items, viewer_id,
        member_repo=member_repo, follow_repo=follow_repo,
        like_repo=like_repo, target_type=LikeTargetType.POST, post_repo=post_repo,
    )
    result = feed_assembler.assemble_posts(page, enrichment)
    return result.model_dump() if to_dict else result


def get_youtube_summary(post_repo: IPostRepository, post_id: int, to_dict: bool = True) -> Dict | YoutubeSummaryOut:
    """
    - no post            -> PostNotFound
    - no youtube_url     -> YoutubeUrlMissing
    - still generating   -> YoutubeSummaryInProgress
    - generation failed  -> YoutubeSummaryFailed
    """
    post = post_repo.get_post(post_id)
    if not post:
        raise PostNotFound(post_id)
    if not post.youtube_url:
        raise YoutubeUrlMissing(post_id)

    summary = post.youtube_summary
    if summary is None or summary == YoutubeSummaryStatus.IN_PROGRESS.value:
        raise YoutubeSummaryInProgress(post_id)
    if summary == YoutubeSummaryStatus.FAILED.value:
        raise YoutubeSummaryFailed(post_id)

    out = YoutubeSummaryOut(post_id=post.id, youtube_url=post.youtube_url, summary=summary)
    return out.model_dump() if to_dict else out
