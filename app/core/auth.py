from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from app.core.exceptions import AuthError, PermissionDeniedError
from app.core.security import decode_access_token

# auto_error=False：没带 token 时交给我们自己决定是 401 还是匿名访问
security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """从 token 中解析出的当前用户"""
    uid: str
    email: Optional[str] = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _user_from_credentials(credentials: HTTPAuthorizationCredentials) -> CurrentUser:
    payload = decode_access_token(credentials.credentials)
    return CurrentUser(
        uid=payload["userId"],
        email=payload.get("email"),
        role=payload.get("role", "user"),
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    必须登录的接口使用：
    - 没有 token / token 无效 -> AuthError（由 main.py 中的 handler 转成 401）
    """
    if credentials is None:
        raise AuthError("Not authenticated")
    return _user_from_credentials(credentials)


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    匿名可访问的接口使用：
    - 没有 token -> None
    - 带了 token 但无效 -> 仍然报 401，避免静默降级为匿名
    """
    if credentials is None:
        return None
    return _user_from_credentials(credentials)


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise PermissionDeniedError("Admin privileges required")
    return current_user
