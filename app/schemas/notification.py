from typing import Optional, List, Dict
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.models.notification import NotificationType, NotificationPriority
from app.schemas.user import UserOut


class NotificationCreate(BaseModel):
    """
    只由通知分发器内部使用，客户端不能直接创建通知
    """
    recipient_id: str
    sender_id: str
    type: NotificationType
    title: str
    content: str
    related_blog_id: Optional[str] = None
    related_comment_id: Optional[str] = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(extra="forbid")


class NotificationOut(BaseModel):
    nid: str
    recipient_id: str
    sender_id: str
    sender: Optional[UserOut] = None
    type: NotificationType
    title: str
    content: str
    related_blog_id: Optional[str] = None
    related_comment_id: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BatchNotificationsOut(BaseModel):
    total: int
    count: int
    unread_count: int
    items: List[NotificationOut]


class NotificationBatchDelete(BaseModel):
    """
    批量删除：
    - 传 ids 时只删除这些通知
    - 否则按 type / delete_read 条件删除
    - 三者都不传视为非法请求，避免误删全部
    """
    ids: Optional[List[str]] = None
    type: Optional[NotificationType] = None
    delete_read: bool = False

    model_config = ConfigDict(extra="forbid")


class NotificationStatsOut(BaseModel):
    total: int
    unread: int
    by_type: Dict[str, Dict[str, int]]
