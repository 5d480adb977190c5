from typing import Optional, List, Protocol

from app.schemas.user import UserCreate, UserOut, UserAllOut, UserUpdate


class IUserRepository(Protocol):
    """
    用户仓库接口协议（数据层抽象接口）
    业务层只依赖本接口，不依赖具体 SQLAlchemy 实现
    """

    def get_user_by_uid(self, uid: str) -> Optional[UserAllOut]:
        """按 uid 获取用户（包含停用用户），不存在返回 None"""
        ...

    def get_user_by_email(self, email: str) -> Optional[UserAllOut]:
        """按邮箱获取用户（登录用，包含密码哈希）"""
        ...

    def get_users_by_uids(self, uids: List[str]) -> List[UserOut]:
        """批量获取用户，返回顺序与 uids 一致，缺失的直接跳过"""
        ...

    def create_user(self, user_data: UserCreate) -> UserAllOut:
        """创建用户，user_data.password 必须已经是哈希"""
        ...

    def update_user(self, uid: str, user_data: UserUpdate) -> Optional[UserAllOut]:
        """部分更新资料（只更新非 None 字段）"""
        ...

    def update_password(self, uid: str, hashed_password: str) -> bool:
        ...

    def set_active(self, uid: str, is_active: bool) -> Optional[UserAllOut]:
        ...

    def set_role(self, uid: str, role: str) -> Optional[UserAllOut]:
        ...

    def touch_last_login(self, uid: str) -> None:
        ...
