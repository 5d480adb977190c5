from typing import Optional, List, Dict, Protocol

from app.schemas.notification import NotificationCreate, NotificationOut


class INotificationRepository(Protocol):
    """
    通知仓库接口：
    - 所有查询只针对某个接收者，且自动排除已过期通知
    """

    def create(self, data: NotificationCreate) -> NotificationOut:
        ...

    def purge_expired(self) -> int:
        """物理删除已过期通知，返回删除条数"""
        ...

    def list_for_recipient(
        self,
        recipient_id: str,
        page: int,
        page_size: int,
        type: Optional[str] = None,
        is_read: Optional[bool] = None,
    ) -> tuple[int, List[NotificationOut]]:
        """返回 (total, 当前页)，按创建时间倒序"""
        ...

    def unread_count(self, recipient_id: str) -> int:
        ...

    def mark_read(self, nid: str, recipient_id: str) -> Optional[NotificationOut]:
        """不存在或不属于该接收者时返回 None"""
        ...

    def mark_all_read(self, recipient_id: str, type: Optional[str] = None) -> int:
        ...

    def delete(self, nid: str, recipient_id: str) -> bool:
        ...

    def delete_many(
        self,
        recipient_id: str,
        ids: Optional[List[str]] = None,
        type: Optional[str] = None,
        delete_read: bool = False,
    ) -> int:
        ...

    def stats(self, recipient_id: str) -> Dict[str, Dict[str, int]]:
        """按类型统计 {type: {"total": n, "unread": m}}"""
        ...
