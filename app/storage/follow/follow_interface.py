from typing import List, Protocol

from app.schemas.follow import FollowCreate, FollowOut


class IFollowRepository(Protocol):
    """
    关注关系仓库接口协议（数据层抽象接口）
    业务层只依赖本接口，不依赖具体 SQLAlchemy 实现
    """

    def create_follow(self, data: FollowCreate) -> FollowOut:
        """
        创建关注关系：
        - 如果之前存在软删除记录，视为“重新关注”，会把 deleted_at 置空
        - 如果已经存在有效记录，直接返回当前记录（是否视为错误交给业务层决定）
        """
        ...

    def cancel_follow(self, data: FollowCreate) -> bool:
        """
        取消关注（软删除）：
        - 返回是否成功取消（不存在有效记录则返回 False）
        """
        ...

    def is_following(self, user_id: str, followed_user_id: str) -> bool:
        """判断 user_id 是否正在关注 followed_user_id（软删除的不算）"""
        ...

    def list_following_ids(self, user_id: str) -> List[str]:
        """user_id 关注的人，按关注时间倒序"""
        ...

    def list_follower_ids(self, user_id: str) -> List[str]:
        """关注 user_id 的人，按关注时间倒序"""
        ...

    def count_following(self, user_id: str) -> int:
        ...

    def count_followers(self, user_id: str) -> int:
        ...
