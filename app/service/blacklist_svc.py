from typing import Optional, Dict

from app.core.config import settings
from app.core.content_filter import validate_content
from app.core.logx import logger
from app.core.exceptions import (
    AlreadyBlockedError,
    AlreadyExistsError,
    BlockYourselfError,
    NotBlockedError,
    UserNotFound,
)
from app.schemas.blacklist import BlacklistOut, BatchBlacklistOut, BlockCheckOut
from app.storage.blacklist.blacklist_interface import IBlacklistRepository
from app.storage.user.user_interface import IUserRepository


def block_user(
    blacklist_repo: IBlacklistRepository,
    user_repo: IUserRepository,
    blocker_id: str,
    blocked_id: str,
    reason: Optional[str] = None,
    to_dict: bool = True,
) -> Dict | BlacklistOut:
    """
    拉黑用户（不会自动取消双方的关注关系）
    """
    if blocker_id == blocked_id:
        raise BlockYourselfError()

    reason = (reason or "").strip() or None
    validate_content(
        reason,
        field="reason",
        max_length=settings.BLOCK_REASON_MAX_LENGTH,
        strict_mode=settings.MODERATION_STRICT_MODE,
        allow_empty=True,
    )

    if not user_repo.get_user_by_uid(blocked_id):
        raise UserNotFound(blocked_id)

    if blacklist_repo.exists(blocker_id, blocked_id):
        raise AlreadyBlockedError()

    try:
        record = blacklist_repo.create(blocker_id, blocked_id, reason)
    except AlreadyExistsError as e:
        # 并发重复拉黑，唯一约束兜底
        raise AlreadyBlockedError() from e

    logger.info(f"{blocker_id} blocked {blocked_id}")
    return record.model_dump() if to_dict else record


def unblock_user(blacklist_repo: IBlacklistRepository, blocker_id: str, blocked_id: str) -> bool:
    if not blacklist_repo.delete(blocker_id, blocked_id):
        raise NotBlockedError()

    logger.info(f"{blocker_id} unblocked {blocked_id}")
    return True


def list_blocked(
    blacklist_repo: IBlacklistRepository,
    blocker_id: str,
    page: int = 0,
    page_size: int = 10,
    to_dict: bool = True,
) -> Dict | BatchBlacklistOut:
    result = blacklist_repo.list_blocked(blocker_id, page=page, page_size=page_size)
    return result.model_dump() if to_dict else result


def is_blocked(blacklist_repo: IBlacklistRepository, blocker_id: str, blocked_id: str) -> bool:
    """单向：blocker 是否拉黑了 blocked"""
    return blacklist_repo.exists(blocker_id, blocked_id)


def has_block_relation(blacklist_repo: IBlacklistRepository, user_a: str, user_b: str) -> bool:
    """双向：任一方拉黑了另一方"""
    return blacklist_repo.exists_either(user_a, user_b)


def check_block(
    blacklist_repo: IBlacklistRepository,
    current_uid: str,
    target_uid: str,
    to_dict: bool = True,
) -> Dict | BlockCheckOut:
    result = BlockCheckOut(
        user_id=target_uid,
        is_blocked=is_blocked(blacklist_repo, current_uid, target_uid),
        has_block_relation=has_block_relation(blacklist_repo, current_uid, target_uid),
    )
    return result.model_dump() if to_dict else result
