from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.models.notification import NotificationType
from app.schemas.notification import (
    BatchNotificationsOut,
    NotificationBatchDelete,
    NotificationOut,
    NotificationStatsOut,
)
from app.core.auth import CurrentUser, get_current_user
from app.core.biz_response import BizResponse
from app.core.config import settings
from app.service import notification_svc

from app.storage.database import get_notification_repo
from app.storage.notification.notification_interface import INotificationRepository
from app.core.exceptions import NotificationNotFound, ValidationError
from app.core.logx import logger

notifications_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notifications_router.get("", response_model=BatchNotificationsOut)
def list_notifications(
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    type: Optional[NotificationType] = None,
    is_read: Optional[bool] = None,
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    """
    我的通知，按时间倒序，附带未读数
    """
    try:
        result = notification_svc.list_notifications(
            notification_repo=notification_repo,
            current_uid=current_user.uid,
            page=page,
            page_size=page_size,
            type=type,
            is_read=is_read,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("list_notifications error")
        return BizResponse(data=list(), msg=str(e), status_code=500)


@notifications_router.get("/unread-count")
def unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    try:
        count = notification_svc.unread_count(notification_repo=notification_repo, current_uid=current_user.uid)
        return BizResponse(data={"unread_count": count})
    except Exception as e:
        logger.exception("unread_count error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@notifications_router.get("/stats", response_model=NotificationStatsOut)
def notification_stats(
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    try:
        result = notification_svc.notification_stats(
            notification_repo=notification_repo, current_uid=current_user.uid, to_dict=True
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("notification_stats error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@notifications_router.post("/read/{nid}", response_model=NotificationOut)
def mark_read(
    nid: str,
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    try:
        result = notification_svc.mark_read(
            notification_repo=notification_repo, current_uid=current_user.uid, nid=nid, to_dict=True
        )
        return BizResponse(data=result)
    except NotificationNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("mark_read error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@notifications_router.post("/read-all")
def mark_all_read(
    type: Optional[NotificationType] = None,
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    try:
        modified = notification_svc.mark_all_read(
            notification_repo=notification_repo, current_uid=current_user.uid, type=type
        )
        return BizResponse(data={"modified_count": modified})
    except Exception as e:
        logger.exception("mark_all_read error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@notifications_router.delete("/{nid}")
def delete_notification(
    nid: str,
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    try:
        ok = notification_svc.delete_notification(
            notification_repo=notification_repo, current_uid=current_user.uid, nid=nid
        )
        return BizResponse(data=ok)
    except NotificationNotFound as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("delete_notification error")
        return BizResponse(data=False, msg=str(e), status_code=500)


@notifications_router.delete("")
def delete_notifications(
    data: NotificationBatchDelete,
    current_user: CurrentUser = Depends(get_current_user),
    notification_repo: INotificationRepository = Depends(get_notification_repo),
):
    """
    批量删除：按 ids，或按 type / 已读 条件
    """
    try:
        deleted = notification_svc.delete_notifications(
            notification_repo=notification_repo, current_uid=current_user.uid, data=data
        )
        return BizResponse(data={"deleted_count": deleted})
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except Exception as e:
        logger.exception("delete_notifications error")
        return BizResponse(data=None, msg=str(e), status_code=500)
