from typing import Optional, List, Protocol

from app.schemas.comment import CommentRecord


class ICommentRepository(Protocol):
    """
    评论仓库接口（两层结构：顶层评论 + 扁平回复列表）
    """

    def create_comment(
        self,
        blog_id: str,
        author_id: str,
        content: str,
        parent_id: Optional[str] = None,
        reply_to_id: Optional[str] = None,
        from_user_name: Optional[str] = None,
        to_user_name: Optional[str] = None,
    ) -> CommentRecord:
        """parent_id 必须是顶层评论的 cid（由业务层保证）"""
        ...

    def get_comment(self, cid: str) -> Optional[CommentRecord]:
        ...

    def list_top_level(self, blog_id: str) -> List[CommentRecord]:
        """博客下的顶层评论，按时间倒序"""
        ...

    def list_replies(self, parent_ids: List[str]) -> List[CommentRecord]:
        """若干顶层评论下的全部回复，按时间正序"""
        ...

    def list_thread_ids(self, cid: str) -> List[str]:
        """cid 本身 + parent_id 为 cid 的所有回复"""
        ...

    def delete_thread(self, cid: str) -> int:
        """删除 cid 及其全部回复，返回删除条数"""
        ...

    def list_ids_by_blog(self, blog_id: str) -> List[str]:
        ...

    def delete_by_blog(self, blog_id: str) -> int:
        ...

    def set_like_count(self, cid: str, like_count: int) -> None:
        ...
