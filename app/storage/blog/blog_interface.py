from typing import Optional, Protocol

from app.schemas.blog import BlogCreate, BlogUpdate, BlogOut, BlogDetailOut, BatchBlogsOut


class IBlogRepository(Protocol):
    """
    博客仓库接口（数据层抽象接口）
    """

    def create_blog(self, user_id: str, data: BlogCreate) -> BlogOut:
        ...

    def get_blog(self, bid: str) -> Optional[BlogDetailOut]:
        """获取博客（附带作者），不存在返回 None"""
        ...

    def list_blogs(
        self,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        user_id: Optional[str] = None,
        sort_latest: bool = True,
    ) -> BatchBlogsOut:
        """
        分页列表：
        - search: 标题或正文模糊匹配
        - user_id: 只看某个作者
        - sort_latest: True 按时间倒序，False 按浏览数倒序
        """
        ...

    def update_blog(self, bid: str, data: BlogUpdate) -> Optional[BlogOut]:
        ...

    def delete_blog(self, bid: str) -> bool:
        ...

    def increment_view(self, bid: str) -> Optional[BlogOut]:
        """view_count += 1"""
        ...

    def update_favorite_count(self, bid: str, step: int = 1) -> Optional[BlogOut]:
        """favorite_count += step，结果不小于 0"""
        ...
