from typing import Optional, Protocol

from app.schemas.favorite import FavoriteOut, BatchFavoritesOut


class IFavoriteRepository(Protocol):
    """
    收藏仓库接口：每个 (user, blog) 最多一条
    """

    def create(
        self,
        user_id: str,
        blog_id: str,
        blog_title: str,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> FavoriteOut:
        ...

    def delete(self, user_id: str, blog_id: str) -> bool:
        ...

    def exists(self, user_id: str, blog_id: str) -> bool:
        ...

    def list_by_user(
        self, user_id: str, page: int, page_size: int, category: Optional[str] = None
    ) -> BatchFavoritesOut:
        """按收藏时间倒序"""
        ...

    def delete_by_blog(self, blog_id: str) -> int:
        """删除博客时清理所有收藏，返回删除条数"""
        ...
