from typing import Optional, Protocol

from app.schemas.blacklist import BlacklistOut, BatchBlacklistOut


class IBlacklistRepository(Protocol):
    """
    拉黑关系仓库接口：有向边 (blocker, blocked)，每个有序对唯一
    """

    def create(self, blocker_id: str, blocked_id: str, reason: Optional[str] = None) -> BlacklistOut:
        """新增拉黑记录，重复时由唯一约束抛 AlreadyExistsError"""
        ...

    def delete(self, blocker_id: str, blocked_id: str) -> bool:
        """删除拉黑记录，不存在返回 False"""
        ...

    def exists(self, blocker_id: str, blocked_id: str) -> bool:
        """单向：blocker 是否拉黑了 blocked"""
        ...

    def exists_either(self, user_a: str, user_b: str) -> bool:
        """双向：任一方向存在拉黑即为 True"""
        ...

    def list_blocked(self, blocker_id: str, page: int, page_size: int) -> BatchBlacklistOut:
        """拉黑列表，按拉黑时间倒序，附带被拉黑用户信息"""
        ...
