from typing import List, Set, Protocol


class ICommentLikeRepository(Protocol):
    """
    评论点赞集合仓库：一行 = 一个用户在某条评论的点赞集合中
    """

    def exists(self, comment_id: str, user_id: str) -> bool:
        ...

    def add(self, comment_id: str, user_id: str) -> None:
        """加入点赞集合，重复时由唯一约束抛 AlreadyExistsError"""
        ...

    def remove(self, comment_id: str, user_id: str) -> bool:
        ...

    def count(self, comment_id: str) -> int:
        """点赞集合大小"""
        ...

    def liked_comment_ids(self, user_id: str, comment_ids: List[str]) -> Set[str]:
        """comment_ids 中 user_id 点过赞的那些"""
        ...

    def delete_by_comments(self, comment_ids: List[str]) -> int:
        ...
