from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict
from datetime import datetime
from app.models.user import UserRole

class UserRegister(BaseModel):
    """
    注册（邮箱 + 密码），长度等业务约束在 service 层按配置校验
    """
    username: str
    email: EmailStr
    password: str

    model_config = ConfigDict(extra="forbid")


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    model_config = ConfigDict(extra="forbid")


class UserCreate(BaseModel):
    """
    仓库层创建用户（password 已是哈希）
    """
    username: str
    email: str
    password: str
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.USER

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class UserOut(BaseModel):
    """
    对外返回的用户基础信息（不包含 password、email 等敏感字段）
    """
    uid: str
    username: str
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserPrivateOut(UserOut):
    """本人视角：额外包含邮箱和最后登录时间"""
    email: str
    last_login_at: Optional[datetime] = None


class UserAllOut(UserPrivateOut):
    """
    仓库内部使用，包含密码哈希，不要直接返回给前端
    """
    password: str


class UserProfileOut(BaseModel):
    """用户主页：基础信息 + 关注数/粉丝数"""
    user: UserOut
    following_count: int = 0
    followers_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    """注册 / 登录成功返回"""
    user: UserPrivateOut
    token: str


class UserUpdate(BaseModel):
    """
    普通用户更新自己的资料，角色/状态只能走管理员接口
    """
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class UserPasswordUpdate(BaseModel):
    """
    修改密码（单独接口，避免与普通更新混用）
    """
    old_password: str
    new_password: str

    model_config = ConfigDict(extra="forbid")


class UserStatusUpdate(BaseModel):
    is_active: bool

    model_config = ConfigDict(extra="forbid")


class UserRoleUpdate(BaseModel):
    role: UserRole

    model_config = ConfigDict(extra="forbid")
