from typing import Optional, List, Dict

from sqlalchemy import or_, func, case
from sqlalchemy.orm import Session, joinedload

from app.models.notification import Notification
from app.schemas.notification import NotificationCreate, NotificationOut
from app.storage.notification.notification_interface import INotificationRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyNotificationRepository(INotificationRepository):
    """
    使用 SQLAlchemy 实现的通知仓库
    """

    def __init__(self, db: Session):
        self.db = db

    def _live_query(self, recipient_id: str):
        """某接收者未过期的通知"""
        return self.db.query(Notification).filter(
            Notification.recipient_id == recipient_id,
            or_(Notification.expires_at.is_(None), Notification.expires_at > now_utc8()),
        )

    def create(self, data: NotificationCreate) -> NotificationOut:
        payload = data.model_dump()
        payload["type"] = data.type.value
        payload["priority"] = data.priority.value

        notification = Notification(**payload, created_at=now_utc8())

        with transaction(self.db):
            self.db.add(notification)

        self.db.refresh(notification)
        return NotificationOut.model_validate(notification)

    def purge_expired(self) -> int:
        q = self.db.query(Notification).filter(
            Notification.expires_at.isnot(None),
            Notification.expires_at <= now_utc8(),
        )
        with transaction(self.db):
            deleted = q.delete(synchronize_session=False)
        return deleted

    def list_for_recipient(
        self,
        recipient_id: str,
        page: int,
        page_size: int,
        type: Optional[str] = None,
        is_read: Optional[bool] = None,
    ) -> tuple[int, List[NotificationOut]]:
        base_q = self._live_query(recipient_id).options(joinedload(Notification.sender))
        if type:
            base_q = base_q.filter(Notification.type == type)
        if is_read is not None:
            base_q = base_q.filter(Notification.is_read.is_(is_read))

        base_q = base_q.order_by(Notification.created_at.desc(), Notification._id.desc())

        total = base_q.count()
        rows = base_q.offset(page * page_size).limit(page_size).all()
        return total, [NotificationOut.model_validate(n) for n in rows]

    def unread_count(self, recipient_id: str) -> int:
        return self._live_query(recipient_id).filter(Notification.is_read.is_(False)).count()

    def mark_read(self, nid: str, recipient_id: str) -> Optional[NotificationOut]:
        notification = self._live_query(recipient_id).filter(Notification.nid == nid).first()
        if not notification:
            return None

        if not notification.is_read:
            with transaction(self.db):
                notification.is_read = True
                notification.read_at = now_utc8()
            self.db.refresh(notification)

        return NotificationOut.model_validate(notification)

    def mark_all_read(self, recipient_id: str, type: Optional[str] = None) -> int:
        q = self._live_query(recipient_id).filter(Notification.is_read.is_(False))
        if type:
            q = q.filter(Notification.type == type)

        with transaction(self.db):
            modified = q.update(
                {Notification.is_read: True, Notification.read_at: now_utc8()},
                synchronize_session=False,
            )
        return modified

    def delete(self, nid: str, recipient_id: str) -> bool:
        notification = (
            self.db.query(Notification)
            .filter(Notification.nid == nid, Notification.recipient_id == recipient_id)
            .first()
        )
        if not notification:
            return False

        with transaction(self.db):
            self.db.delete(notification)
        return True

    def delete_many(
        self,
        recipient_id: str,
        ids: Optional[List[str]] = None,
        type: Optional[str] = None,
        delete_read: bool = False,
    ) -> int:
        q = self.db.query(Notification).filter(Notification.recipient_id == recipient_id)
        if ids:
            q = q.filter(Notification.nid.in_(ids))
        else:
            if type:
                q = q.filter(Notification.type == type)
            if delete_read:
                q = q.filter(Notification.is_read.is_(True))

        with transaction(self.db):
            deleted = q.delete(synchronize_session=False)
        return deleted

    def stats(self, recipient_id: str) -> Dict[str, Dict[str, int]]:
        unread_expr = func.sum(case((Notification.is_read.is_(False), 1), else_=0))
        rows = (
            self._live_query(recipient_id)
            .with_entities(Notification.type, func.count(Notification._id), unread_expr)
            .group_by(Notification.type)
            .all()
        )
        return {
            type_: {"total": int(total or 0), "unread": int(unread or 0)}
            for type_, total, unread in rows
        }
