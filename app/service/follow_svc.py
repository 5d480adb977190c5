from typing import Optional, Dict, List, Set

from app.schemas.follow import (
    FollowCreate,
    FollowOut,
    RelationUserOut,
    RelationshipInfoOut,
    FollowStatusOut,
)
from app.schemas.user import UserOut
from app.schemas.user_stats import UserStatsOut
from app.storage.user.user_interface import IUserRepository
from app.storage.user_stats.user_stats_interface import IUserStatsRepository
from app.storage.follow.follow_interface import IFollowRepository
from app.service.notification_dispatcher import NotificationDispatcher
from app.models.notification import NotificationType

from app.core.logx import logger
from app.core.exceptions import (
    BizError,
    UserNotFound,
    FollowYourselfError,
    AlreadyFollowingError,
    NotFollowingError,
    UnexpectedError,
    ValidationError,
)


def _apply_counters(stats_repo: IUserStatsRepository, current_uid: str, target_uid: str, step: int) -> None:
    """
    关注记录写成功之后更新两边的冗余计数。
    计数写失败时关注记录已经落库，记一条 [RECONCILE] 日志等待对账，再把错误抛出去
    """
    try:
        stats_repo.update_following(current_uid, step=step)
        stats_repo.update_followers(target_uid, step=step)
    except BizError as e:
        logger.error(
            f"[RECONCILE] user_stats out of sync after follow change "
            f"{current_uid} -> {target_uid} step={step}: {e}"
        )
        raise UnexpectedError("Relationship saved but counters failed to update.") from e


def follow_user(
    follow_repo: IFollowRepository,
    stats_repo: IUserStatsRepository,
    user_repo: IUserRepository,
    notifier: NotificationDispatcher,
    current_uid: str,
    target_uid: str,
    to_dict: bool = True,
) -> Dict | FollowOut:
    """
    关注用户：
    1. 禁止关注自己
    2. 检查被关注用户是否存在
    3. 已关注直接报错，不重复计数
    4. 创建 Follow 记录（软删除过的记录会被恢复）
    5. 更新统计：current_uid.following +1, target_uid.followers +1
    6. 通知被关注者
    """
    if current_uid == target_uid:
        raise FollowYourselfError(current_uid)

    target_user = user_repo.get_user_by_uid(target_uid)
    if not target_user:
        raise UserNotFound(message=f"target_user {target_uid} not found")

    if follow_repo.is_following(current_uid, target_uid):
        raise AlreadyFollowingError(current_uid, target_uid)

    follow = follow_repo.create_follow(
        FollowCreate(user_id=current_uid, followed_user_id=target_uid)
    )
    _apply_counters(stats_repo, current_uid, target_uid, step=1)
    logger.info(f"{current_uid} followed {target_uid}")

    notifier.notify(
        recipient_id=target_uid,
        sender_id=current_uid,
        type=NotificationType.FOLLOW,
    )

    return follow.model_dump() if to_dict else follow


def cancel_follow(
    follow_repo: IFollowRepository,
    stats_repo: IUserStatsRepository,
    user_repo: IUserRepository,
    current_uid: str,
    target_uid: str,
) -> bool:
    """
    取消关注：
    1. 目标用户必须存在
    2. 必须正在关注
    3. 软删除 Follow 记录
    4. 更新统计：current_uid.following -1, target_uid.followers -1
    """
    if not user_repo.get_user_by_uid(target_uid):
        raise UserNotFound(message=f"target_user {target_uid} not found")

    if not follow_repo.is_following(current_uid, target_uid):
        raise NotFollowingError(current_uid, target_uid)

    ok = follow_repo.cancel_follow(FollowCreate(user_id=current_uid, followed_user_id=target_uid))
    if not ok:
        # 并发取关，另一个请求已经处理了计数
        raise NotFollowingError(current_uid, target_uid)

    # 防止减到负数，由数据层保证
    _apply_counters(stats_repo, current_uid, target_uid, step=-1)
    logger.info(f"{current_uid} unfollowed {target_uid}")
    return True


def _annotate(users: List[UserOut], viewer_following: Set[str]) -> List[RelationUserOut]:
    return [
        RelationUserOut(
            uid=u.uid,
            username=u.username,
            avatar_url=u.avatar_url,
            is_following=u.uid in viewer_following,
        )
        for u in users
    ]


def get_relationship_info(
    follow_repo: IFollowRepository,
    stats_repo: IUserStatsRepository,
    user_repo: IUserRepository,
    user_id: Optional[str] = None,
    viewer_id: Optional[str] = None,
    to_dict: bool = True,
) -> Dict | RelationshipInfoOut:
    """
    关注 / 粉丝信息：
    - 不传 user_id 时查看自己的（匿名则报错）
    - 列表中每个人带 is_following：查看者是否关注了他，
      查看者的关注列表先转成 set，避免 O(n*m) 的成员判断
    """
    target_uid = user_id or viewer_id
    if not target_uid:
        raise ValidationError("user_id is required for anonymous requests")

    if not user_repo.get_user_by_uid(target_uid):
        raise UserNotFound(target_uid)

    following_ids = follow_repo.list_following_ids(target_uid)
    follower_ids = follow_repo.list_follower_ids(target_uid)

    if viewer_id is None:
        viewer_following: Set[str] = set()
    elif viewer_id == target_uid:
        viewer_following = set(following_ids)
    else:
        viewer_following = set(follow_repo.list_following_ids(viewer_id))

    stats = stats_repo.get_by_user_id(target_uid)
    info = RelationshipInfoOut(
        user_id=target_uid,
        following_count=stats.following_count if stats else len(following_ids),
        followers_count=stats.followers_count if stats else len(follower_ids),
        following=_annotate(user_repo.get_users_by_uids(following_ids), viewer_following),
        followers=_annotate(user_repo.get_users_by_uids(follower_ids), viewer_following),
        is_following=target_uid in viewer_following,
    )
    return info.model_dump() if to_dict else info


def get_follow_status(
    follow_repo: IFollowRepository,
    user_id: str,
    follow_id: str,
    to_dict: bool = True,
) -> Dict | FollowStatusOut:
    """user_id 是否关注了 follow_id"""
    status = FollowStatusOut(
        user_id=user_id,
        follow_id=follow_id,
        is_following=follow_repo.is_following(user_id, follow_id),
    )
    return status.model_dump() if to_dict else status


def reconcile_user_stats(
    follow_repo: IFollowRepository,
    stats_repo: IUserStatsRepository,
    user_repo: IUserRepository,
    uid: str,
    to_dict: bool = True,
) -> Dict | UserStatsOut:
    """
    管理员对账：按 follows 表重新计算关注数 / 粉丝数
    """
    if not user_repo.get_user_by_uid(uid):
        raise UserNotFound(uid)

    following = follow_repo.count_following(uid)
    followers = follow_repo.count_followers(uid)
    stats = stats_repo.set_counts(uid, following_count=following, followers_count=followers)
    logger.info(f"[ADMIN] reconciled user_stats uid={uid} following={following} followers={followers}")
    return stats.model_dump() if to_dict else stats
