"""
通知分发器：
- 评论 / 回复 / 点赞 / 关注 成功后调用 notify()
- 通过 FastAPI BackgroundTasks 在响应返回之后执行，使用独立的数据库会话
- 任何异常只记日志，不重试，也不会影响触发它的主操作
"""
from datetime import timedelta
from typing import Callable, Optional

from fastapi import BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logx import logger
from app.core.time import now_utc8
from app.models.notification import NotificationType, NotificationPriority
from app.schemas.notification import NotificationCreate
from app.storage.database import get_session_factory
from app.storage.user.SQLAlchemyUserRepository import SQLAlchemyUserRepository
from app.storage.blog.SQLAlchemyBlogRepository import SQLAlchemyBlogRepository
from app.storage.notification.SQLAlchemyNotificationRepository import SQLAlchemyNotificationRepository

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 500
EXCERPT_LENGTH = 50

_TITLES = {
    NotificationType.COMMENT: "新评论",
    NotificationType.REPLY: "新回复",
    NotificationType.LIKE: "收到点赞",
    NotificationType.FOLLOW: "新粉丝",
    NotificationType.SYSTEM: "系统通知",
}


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def compose_message(
    type: NotificationType,
    sender_name: str,
    blog_title: Optional[str] = None,
    excerpt: Optional[str] = None,
) -> tuple[str, str]:
    """按通知类型拼接标题和正文，超长截断"""
    title = _TITLES[type]
    where = f"《{blog_title}》" if blog_title else ""
    snippet = f"：{_truncate(excerpt, EXCERPT_LENGTH)}" if excerpt else ""

    if type == NotificationType.COMMENT:
        content = f"{sender_name} 评论了你的博客{where}{snippet}"
    elif type == NotificationType.REPLY:
        content = f"{sender_name} 回复了你{snippet}"
    elif type == NotificationType.LIKE:
        content = f"{sender_name} 赞了你的评论{snippet}"
    elif type == NotificationType.FOLLOW:
        content = f"{sender_name} 关注了你"
    else:
        content = excerpt or ""

    return _truncate(title, TITLE_MAX_LENGTH), _truncate(content, CONTENT_MAX_LENGTH)


class NotificationDispatcher:
    """
    fire-and-forget 通知：
    - 有 background_tasks 时挂到响应之后执行
    - 没有时（脚本、测试）当场执行，但同样吞掉异常
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        background_tasks: Optional[BackgroundTasks] = None,
    ):
        self.session_factory = session_factory
        self.background_tasks = background_tasks

    def notify(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_blog_id: Optional[str] = None,
        related_comment_id: Optional[str] = None,
        excerpt: Optional[str] = None,
        priority: NotificationPriority = NotificationPriority.NORMAL,
    ) -> None:
        if recipient_id == sender_id:
            return

        args = (recipient_id, sender_id, type, related_blog_id, related_comment_id, excerpt, priority)
        if self.background_tasks is not None:
            self.background_tasks.add_task(self._deliver, *args)
        else:
            self._deliver(*args)

    def _deliver(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_blog_id: Optional[str],
        related_comment_id: Optional[str],
        excerpt: Optional[str],
        priority: NotificationPriority,
    ) -> None:
        db = None
        try:
            db = self.session_factory()
            sender = SQLAlchemyUserRepository(db).get_user_by_uid(sender_id)
            sender_name = sender.username if sender else "有人"

            blog_title = None
            if related_blog_id:
                blog = SQLAlchemyBlogRepository(db).get_blog(related_blog_id)
                blog_title = blog.title if blog else None

            title, content = compose_message(type, sender_name, blog_title, excerpt)

            expires_at = None
            if settings.NOTIFICATION_TTL_DAYS > 0:
                expires_at = now_utc8() + timedelta(days=settings.NOTIFICATION_TTL_DAYS)

            created = SQLAlchemyNotificationRepository(db).create(
                NotificationCreate(
                    recipient_id=recipient_id,
                    sender_id=sender_id,
                    type=type,
                    title=title,
                    content=content,
                    related_blog_id=related_blog_id,
                    related_comment_id=related_comment_id,
                    priority=priority,
                    expires_at=expires_at,
                )
            )
            logger.info(f"Notification {created.nid} ({type.value}) {sender_id} -> {recipient_id}")
        except Exception:
            # 通知失败不影响主流程，只记录
            logger.exception(
                f"notify failed: type={type.value} sender={sender_id} recipient={recipient_id}"
            )
        finally:
            if db is not None:
                db.close()


def get_notifier(
    background_tasks: BackgroundTasks,
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> NotificationDispatcher:
    return NotificationDispatcher(session_factory=session_factory, background_tasks=background_tasks)
