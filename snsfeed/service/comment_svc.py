from typing import Dict, Optional

from sqlalchemy.orm import Session

from snsfeed.core.db import on_commit, transaction
from snsfeed.core.exceptions import (
    CommentNotFound,
    ForbiddenAction,
    MemberNotFound,
    PostNotFound,
    RecommentNotFound,
)
from snsfeed.core.logx import logger
from snsfeed.models.like import LikeTargetType
from snsfeed.schemas.comment import (
    BatchCommentsOut,
    BatchRecommentsOut,
    CommentCreate,
    CommentInfo,
    CreateCommentOut,
)
from snsfeed.service import counter_svc, feed_assembler
from snsfeed.service.enrichment_svc import enrich
from snsfeed.storage.comment.comment_interface import ICommentRepository
from snsfeed.storage.counter.counter_interface import ICounterRepository
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.like.like_interface import ILikeRepository
from snsfeed.storage.member.member_interface import IMemberRepository
from snsfeed.storage.post.post_interface import IPostRepository


def comment_created_event(comment_id: int) -> str:
    """Dedup key of the bot reply scheduled for a new comment."""
    return f"comment-created:{comment_id}"


# ----------------------------- create -----------------------------

def create_comment(
    db: Session,
    member_repo: IMemberRepository,
    post_repo: IPostRepository,
    comment_repo: ICommentRepository,
    counter_repo: ICounterRepository,
    post_id: int,
    data: CommentCreate,
    bot_reply=None,
    to_dict: bool = True,
) -> Dict | CreateCommentOut:
    """
    Create a comment on a post, or a recomment when ``data.parent_id`` is set.

    For a top-level comment:
    1. insert the comment and bump posts.comment_count in one transaction
    2. if the post was written by the bot and the commenter is not the bot,
       register ``bot_reply.trigger`` to run once the transaction commits
    """
    if data.parent_id is not None:
        return create_recomment(
            db, member_repo, comment_repo, counter_repo,
            comment_id=data.parent_id, member_id=data.member_id, content=data.content,
            post_id=post_id, to_dict=to_dict,
        )

    member = member_repo.get_member(data.member_id)
    if not member:
        raise MemberNotFound(data.member_id)
    post = post_repo.get_post(post_id)
    if not post:
        raise PostNotFound(post_id)

    with transaction(db):
        comment = comment_repo.create_comment(post.id, member.id, data.content)
        counter_svc.adjust_comment_count(db, counter_repo, post.id, 1)

        if bot_reply is not None and not member.is_bot:
            post_author = member_repo.get_member(post.member_id)
            if post_author is not None and post_author.is_bot:
                on_commit(db, bot_reply.trigger, comment.id, comment_created_event(comment.id))

    logger.info(f"[COMMENT] member {member.id} commented {comment.id} on post {post.id}")

    out = CreateCommentOut(
        id=comment.id,
        post_id=post.id,
        parent_id=None,
        member_id=member.id,
        content=comment.content,
        created_at=comment.created_at,
    )
    return out.model_dump() if to_dict else out


def create_recomment(
    db: Session,
    member_repo: IMemberRepository,
    comment_repo: ICommentRepository,
    counter_repo: ICounterRepository,
    comment_id: int,
    member_id: int,
    content: str,
    post_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | CreateCommentOut:
    """
    Insert a recomment and bump comments.recomment_count together.
    ``post_id``, when given, must be the post the parent comment belongs to.
    """
    member = member_repo.get_member(member_id)
    if not member:
        raise MemberNotFound(member_id)
    comment = comment_repo.get_comment(comment_id)
    if not comment or (post_id is not None and comment.post_id != post_id):
        raise CommentNotFound(comment_id)

    with transaction(db):
        recomment = comment_repo.create_recomment(comment.id, member.id, content)
        counter_svc.adjust_reply_count(db, counter_repo, comment.id, 1)

    logger.info(f"[COMMENT] member {member.id} recommented {recomment.id} on comment {comment.id}")

    out = CreateCommentOut(
        id=recomment.id,
        post_id=comment.post_id,
        parent_id=comment.id,
        member_id=member.id,
        content=recomment.content,
        created_at=recomment.created_at,
    )
    return out.model_dump() if to_dict else out


# ----------------------------- delete -----------------------------

def delete_comment(
    db: Session,
    comment_repo: ICommentRepository,
    counter_repo: ICounterRepository,
    comment_id: int,
    member_id: int,
) -> bool:
    comment = comment_repo.get_comment(comment_id)
    if not comment:
        raise CommentNotFound(comment_id)
    if comment.member_id != member_id:
        raise ForbiddenAction(f"member {member_id} cannot delete comment {comment_id}")

    with transaction(db):
        # a concurrent delete may have won since the read above
        if not comment_repo.soft_delete_comment(comment.id):
            raise CommentNotFound(comment.id)
        counter_svc.adjust_comment_count(db, counter_repo, comment.post_id, -1)
    return True


def delete_recomment(
    db: Session,
    comment_repo: ICommentRepository,
    counter_repo: ICounterRepository,
    recomment_id: int,
    member_id: int,
) -> bool:
    recomment = comment_repo.get_recomment(recomment_id)
    if not recomment:
        raise RecommentNotFound(recomment_id)
    if recomment.member_id != member_id:
        raise ForbiddenAction(f"member {member_id} cannot delete recomment {recomment_id}")

    with transaction(db):
        if not comment_repo.soft_delete_recomment(recomment.id):
            raise RecommentNotFound(recomment.id)
        counter_svc.adjust_reply_count(db, counter_repo, recomment.comment_id, -1)
    return True


# ----------------------------- reads -----------------------------

def get_comment_detail(
    comment_repo: ICommentRepository,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: ILikeRepository,
    comment_id: int,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | CommentInfo:
    comment = comment_repo.get_comment(comment_id)
    if not comment:
        raise CommentNotFound(comment_id)
    enrichment = enrich(
        [comment], viewer_id,
        member_repo=member_repo, follow_repo=follow_repo,
        like_repo=like_repo, target_type=LikeTargetType.COMMENT,
    )
    info = feed_assembler.comment_info(comment, enrichment[comment.id])
    return info.model_dump() if to_dict else info


def list_comments(
    post_repo: IPostRepository,
    comment_repo: ICommentRepository,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: ILikeRepository,
    post_id: int,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchCommentsOut:
    if not post_repo.get_post(post_id):
        raise PostNotFound(post_id)

    page = comment_repo.list_comments(post_id, limit=limit, cursor=cursor)
    enrichment = enrich(
        page.items, viewer_id,
        member_repo=member_repo, follow_repo=follow_repo,
        like_repo=like_repo, target_type=LikeTargetType.COMMENT,
    )
    result = feed_assembler.assemble_comments(page, enrichment)
    return result.model_dump() if to_dict else result


def list_recomments(
    comment_repo: ICommentRepository,
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    like_repo: ILikeRepository,
    comment_id: int,
    limit: int,
    cursor: Optional[int] = None,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | BatchRecommentsOut:
    if not comment_repo.get_comment(comment_id):
        raise CommentNotFound(comment_id)

    page = comment_repo.list_recomments(comment_id, limit=limit, cursor=cursor)
    enrichment = enrich(
        page.items, viewer_id,
        member_repo=member_repo, follow_repo=follow_repo,
        like_repo=like_repo, target_type=LikeTargetType.RECOMMENT,
    )
    result = feed_assembler.assemble_recomments(page, enrichment)
    return result.model_dump() if to_dict else result
