from typing import Protocol

from app.schemas.history import HistoryOut, BatchHistoryOut


class IHistoryRepository(Protocol):
    """
    浏览记录仓库接口：每个 (user, blog) 一条，重复访问只刷新时间
    """

    def upsert_visit(self, user_id: str, blog_id: str, blog_title: str, source: str = "direct") -> HistoryOut:
        ...

    def list_by_user(self, user_id: str, page: int, page_size: int) -> BatchHistoryOut:
        """按最近访问时间倒序"""
        ...

    def delete(self, user_id: str, blog_id: str) -> bool:
        ...

    def clear(self, user_id: str) -> int:
        ...

    def delete_by_blog(self, blog_id: str) -> int:
        ...
