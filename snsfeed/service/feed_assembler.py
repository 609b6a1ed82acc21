# Pure composition of a page and its enrichment into response items; no I/O.
from typing import Dict, List

from snsfeed.core.pagination import CursorPage
from snsfeed.models.comment import Comment, Recomment
from snsfeed.models.member import Member
from snsfeed.models.post import Post
from snsfeed.schemas.comment import BatchCommentsOut, BatchRecommentsOut, CommentInfo, RecommentInfo
from snsfeed.schemas.follow import BatchFollowsOut
from snsfeed.schemas.like import BatchUsersOut
from snsfeed.schemas.member import FollowUserInfo, UserInfoWithFollowing
from snsfeed.schemas.post import BatchPostsOut, PostDetails
from snsfeed.service.enrichment_svc import EnrichmentData

UNKNOWN_NICKNAME = "unknown"


def user_info(data: EnrichmentData) -> UserInfoWithFollowing:
    author = data.author
    if author is None:
        return UserInfoWithFollowing(id=data.author_id, nickname=UNKNOWN_NICKNAME, image_url=None, is_followed=False)
    return UserInfoWithFollowing(
        id=author.id,
        nickname=author.nickname,
        image_url=author.profile_image_url,
        is_followed=data.is_followed,
    )


def post_details(post: Post, data: EnrichmentData) -> PostDetails:
    return PostDetails(
        id=post.id,
        board_type=post.board_type,
        user=user_info(data),
        content=post.content,
        image_url=data.first_image_url,
        youtube_url=post.youtube_url,
        youtube_summary=post.youtube_summary,
        created_at=post.created_at,
        like_count=post.like_count,
        comment_count=post.comment_count,
        is_mine=data.is_mine,
        is_liked=data.is_liked,
    )


def comment_info(comment: Comment, data: EnrichmentData) -> CommentInfo:
    return CommentInfo(
        id=comment.id,
        post_id=comment.post_id,
        user=user_info(data),
        content=comment.content,
        created_at=comment.created_at,
        like_count=comment.like_count,
        recomment_count=comment.recomment_count,
        is_mine=data.is_mine,
        is_liked=data.is_liked,
    )


def recomment_info(recomment: Recomment, data: EnrichmentData) -> RecommentInfo:
    return RecommentInfo(
        id=recomment.id,
        comment_id=recomment.comment_id,
        user=user_info(data),
        content=recomment.content,
        created_at=recomment.created_at,
        like_count=recomment.like_count,
        is_mine=data.is_mine,
        is_liked=data.is_liked,
    )


def follow_user_info(member: Member, data: EnrichmentData) -> FollowUserInfo:
    return FollowUserInfo(
        id=member.id,
        nickname=member.nickname,
        image_url=member.profile_image_url,
        class_name=member.class_name,
        is_followed=data.is_followed,
    )


# ---------- page envelopes ----------
# items keep the order of page.items; the enrichment dict is only used for lookups

def assemble_posts(page: CursorPage, enrichment: Dict[int, EnrichmentData]) -> BatchPostsOut:
    items: List[PostDetails] = [post_details(p, enrichment[p.id]) for p in page.items]
    return BatchPostsOut(count=len(items), items=items, has_next=page.has_next, next_cursor=page.next_cursor)


def assemble_comments(page: CursorPage, enrichment: Dict[int, EnrichmentData]) -> BatchCommentsOut:
    items = [comment_info(c, enrichment[c.id]) for c in page.items]
    return BatchCommentsOut(count=len(items), items=items, has_next=page.has_next, next_cursor=page.next_cursor)


def assemble_recomments(page: CursorPage, enrichment: Dict[int, EnrichmentData]) -> BatchRecommentsOut:
    items = [recomment_info(r, enrichment[r.id]) for r in page.items]
    return BatchRecommentsOut(count=len(items), items=items, has_next=page.has_next, next_cursor=page.next_cursor)


def assemble_follows(page: CursorPage, enrichment: Dict[int, EnrichmentData]) -> BatchFollowsOut:
    items = [follow_user_info(m, enrichment[m.id]) for m in page.items]
    return BatchFollowsOut(count=len(items), items=items, has_next=page.has_next, next_cursor=page.next_cursor)


def assemble_likers(page: CursorPage, enrichment: Dict[int, EnrichmentData]) -> BatchUsersOut:
    items = [follow_user_info(m, enrichment[m.id]) for m in page.items]
    return BatchUsersOut(count=len(items), items=items, has_next=page.has_next, next_cursor=page.next_cursor)
