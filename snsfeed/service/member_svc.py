from typing import Dict, Optional

from snsfeed.core.exceptions import MemberNotFound
from snsfeed.core.logx import logger
from snsfeed.schemas.member import MemberCreate, MemberProfileOut
from snsfeed.service.enrichment_svc import enrich, member_self
from snsfeed.storage.follow.follow_interface import IFollowRepository
from snsfeed.storage.member.member_interface import IMemberRepository


def create_member(member_repo: IMemberRepository, data: MemberCreate, to_dict: bool = True) -> Dict | MemberProfileOut:
    member = member_repo.create_member(data)
    logger.info(f"[MEMBER] created member {member.id} role={data.role.name}")
    out = MemberProfileOut(
        id=member.id,
        nickname=member.nickname,
        image_url=member.profile_image_url,
        class_name=member.class_name,
        follower_count=0,
        following_count=0,
        is_mine=True,
    )
    return out.model_dump() if to_dict else out


def get_member_profile(
    member_repo: IMemberRepository,
    follow_repo: IFollowRepository,
    member_id: int,
    viewer_id: Optional[int] = None,
    to_dict: bool = True,
) -> Dict | MemberProfileOut:
    """Profile with the cached follow counters and the viewer's follow flag."""
    member = member_repo.get_member(member_id)
    if not member:
        raise MemberNotFound(member_id)

    data = enrich([member], viewer_id, member_repo=member_repo, follow_repo=follow_repo, author_of=member_self)[member.id]
    out = MemberProfileOut(
        id=member.id,
        nickname=member.nickname,
        image_url=member.profile_image_url,
        class_name=member.class_name,
        follower_count=member.follower_count,
        following_count=member.following_count,
        is_followed=data.is_followed,
        is_mine=data.is_mine,
    )
    return out.model_dump() if to_dict else out
