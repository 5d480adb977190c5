from typing import Optional, Dict

from app.core.logx import logger
from app.core.exceptions import NotificationNotFound, ValidationError
from app.models.notification import NotificationType
from app.schemas.notification import (
    BatchNotificationsOut,
    NotificationBatchDelete,
    NotificationOut,
    NotificationStatsOut,
)
from app.storage.notification.notification_interface import INotificationRepository


def list_notifications(
    notification_repo: INotificationRepository,
    current_uid: str,
    page: int = 0,
    page_size: int = 10,
    type: Optional[NotificationType] = None,
    is_read: Optional[bool] = None,
    to_dict: bool = True,
) -> Dict | BatchNotificationsOut:
    """
    通知列表：
    - 先清理已过期通知
    - 可按类型、已读状态筛选，附带未读总数
    """
    purged = notification_repo.purge_expired()
    if purged:
        logger.info(f"Purged {purged} expired notifications")

    total, items = notification_repo.list_for_recipient(
        current_uid,
        page=page,
        page_size=page_size,
        type=type.value if type else None,
        is_read=is_read,
    )
    result = BatchNotificationsOut(
        total=total,
        count=len(items),
        unread_count=notification_repo.unread_count(current_uid),
        items=items,
    )
    return result.model_dump() if to_dict else result


def unread_count(notification_repo: INotificationRepository, current_uid: str) -> int:
    return notification_repo.unread_count(current_uid)


def mark_read(
    notification_repo: INotificationRepository, current_uid: str, nid: str, to_dict: bool = True
) -> Dict | NotificationOut:
    """只能标记自己的通知，别人的通知视为不存在"""
    notification = notification_repo.mark_read(nid, current_uid)
    if not notification:
        raise NotificationNotFound(nid)
    return notification.model_dump() if to_dict else notification


def mark_all_read(
    notification_repo: INotificationRepository,
    current_uid: str,
    type: Optional[NotificationType] = None,
) -> int:
    modified = notification_repo.mark_all_read(current_uid, type=type.value if type else None)
    logger.info(f"Marked {modified} notifications read for {current_uid}")
    return modified


def delete_notification(notification_repo: INotificationRepository, current_uid: str, nid: str) -> bool:
    if not notification_repo.delete(nid, current_uid):
        raise NotificationNotFound(nid)
    return True


def delete_notifications(
    notification_repo: INotificationRepository,
    current_uid: str,
    data: NotificationBatchDelete,
) -> int:
    """
    批量删除：ids 优先，否则按 type / delete_read 条件；什么都不传时拒绝执行
    """
    if not data.ids and data.type is None and not data.delete_read:
        raise ValidationError("ids, type or delete_read must be provided")

    deleted = notification_repo.delete_many(
        current_uid,
        ids=data.ids,
        type=data.type.value if data.type else None,
        delete_read=data.delete_read,
    )
    logger.info(f"Deleted {deleted} notifications for {current_uid}")
    return deleted


def notification_stats(
    notification_repo: INotificationRepository, current_uid: str, to_dict: bool = True
) -> Dict | NotificationStatsOut:
    by_type = notification_repo.stats(current_uid)
    result = NotificationStatsOut(
        total=sum(v["total"] for v in by_type.values()),
        unread=sum(v["unread"] for v in by_type.values()),
        by_type=by_type,
    )
    return result.model_dump() if to_dict else result
