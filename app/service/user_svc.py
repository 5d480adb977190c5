import random
from typing import Optional, Dict

from app.schemas.user import (
    UserRegister,
    UserLogin,
    UserCreate,
    UserUpdate,
    UserOut,
    UserPrivateOut,
    UserProfileOut,
    UserPasswordUpdate,
    AuthOut,
)
from app.models.user import UserRole
from app.storage.user.user_interface import IUserRepository
from app.storage.user_stats.user_stats_interface import IUserStatsRepository

from app.core.avatar import random_avatar_url
from app.core.config import settings
from app.core.content_filter import validate_content
from app.core.logx import logger
from app.core.exceptions import (
    AlreadyExistsError,
    AuthError,
    EmailAlreadyRegistered,
    InactiveUserError,
    PasswordMismatchError,
    UserNotFound,
    ValidationError,
)
from app.core.security import hash_password, verify_password, create_access_token


def _validate_username(username: str) -> str:
    username = (username or "").strip()
    validate_content(
        username,
        field="username",
        min_length=settings.USERNAME_MIN_LENGTH,
        max_length=settings.USERNAME_MAX_LENGTH,
        strict_mode=settings.MODERATION_STRICT_MODE,
    )
    return username


def _validate_password(password: str) -> None:
    if not password or len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(f"password must be at least {settings.PASSWORD_MIN_LENGTH} characters")


def _issue_token(user: UserPrivateOut) -> str:
    return create_access_token(user_id=user.uid, email=user.email, role=user.role.value)


def register(
    user_repo: IUserRepository,
    stats_repo: IUserStatsRepository,
    data: UserRegister,
    rng: Optional[random.Random] = None,
    to_dict: bool = True,
) -> Dict | AuthOut:
    """
    注册：
    1. 校验用户名（长度 + 敏感词）、密码长度
    2. 邮箱已注册则报错（用户名允许重复）
    3. Argon2 哈希密码，随机分配头像
    4. 创建 User 记录 + 初始化 UserStats
    5. 签发 token
    """
    username = _validate_username(data.username)
    _validate_password(data.password)
    email = data.email.lower()

    if user_repo.get_user_by_email(email):
        raise EmailAlreadyRegistered(email)

    try:
        new_user = user_repo.create_user(
            UserCreate(
                username=username,
                email=email,
                password=hash_password(data.password),
                avatar_url=random_avatar_url(rng),
                role=UserRole.USER,
            )
        )
    except AlreadyExistsError as e:
        raise EmailAlreadyRegistered(email) from e
    logger.info(f"Created user uid={new_user.uid}")

    stats_repo.create_for_user(new_user.uid)
    logger.info(f"Initialized statistics for user uid={new_user.uid}")

    user = UserPrivateOut.model_validate(new_user.model_dump())
    result = AuthOut(user=user, token=_issue_token(user))
    return result.model_dump() if to_dict else result


def login(user_repo: IUserRepository, data: UserLogin, to_dict: bool = True) -> Dict | AuthOut:
    """
    登录：邮箱不存在和密码错误统一返回同一个提示
    """
    user = user_repo.get_user_by_email(data.email)
    if not user or not verify_password(data.password, user.password):
        raise AuthError("Invalid email or password")

    if not user.is_active:
        raise InactiveUserError()

    user_repo.touch_last_login(user.uid)
    user = user_repo.get_user_by_uid(user.uid)

    private = UserPrivateOut.model_validate(user.model_dump())
    result = AuthOut(user=private, token=_issue_token(private))
    return result.model_dump() if to_dict else result


def get_me(user_repo: IUserRepository, uid: str, to_dict: bool = True) -> Dict | UserPrivateOut:
    user = user_repo.get_user_by_uid(uid)
    if not user:
        raise UserNotFound(uid)
    me = UserPrivateOut.model_validate(user.model_dump())
    return me.model_dump() if to_dict else me


def get_user_profile(
    user_repo: IUserRepository,
    stats_repo: IUserStatsRepository,
    uid: str,
    to_dict: bool = True,
) -> Dict | UserProfileOut:
    """
    用户主页：User 信息 + 关注数/粉丝数
    """
    user = user_repo.get_user_by_uid(uid)
    if not user:
        raise UserNotFound(uid)

    stats = stats_repo.get_by_user_id(uid)
    profile = UserProfileOut(
        user=UserOut.model_validate(user.model_dump()),
        following_count=stats.following_count if stats else 0,
        followers_count=stats.followers_count if stats else 0,
    )
    return profile.model_dump() if to_dict else profile


def update_user(user_repo: IUserRepository, uid: str, data: UserUpdate, to_dict: bool = True) -> Dict | UserPrivateOut:
    """
    普通用户更新自己的信息
    """
    if data.username is not None:
        data.username = _validate_username(data.username)

    updated = user_repo.update_user(uid, data)
    if not updated:
        raise UserNotFound(uid)

    out = UserPrivateOut.model_validate(updated.model_dump())
    return out.model_dump() if to_dict else out


def change_password(user_repo: IUserRepository, uid: str, data: UserPasswordUpdate) -> bool:
    """
    修改密码：先校验旧密码，再写入新密码的哈希
    """
    user = user_repo.get_user_by_uid(uid)
    if not user:
        raise UserNotFound(uid)

    if not verify_password(data.old_password, user.password):
        raise PasswordMismatchError()
    _validate_password(data.new_password)

    ok = user_repo.update_password(uid, hash_password(data.new_password))
    logger.info(f"Password changed uid={uid}")
    return ok


def set_user_active(
    user_repo: IUserRepository, admin_uid: str, uid: str, is_active: bool, to_dict: bool = True
) -> Dict | UserOut:
    """
    管理员启用 / 停用账号（停用即软删除，不物理删除）
    """
    updated = user_repo.set_active(uid, is_active)
    if not updated:
        raise UserNotFound(uid)

    logger.info(f"[ADMIN] {admin_uid} set is_active={is_active} for uid={uid}")
    out = UserOut.model_validate(updated.model_dump())
    return out.model_dump() if to_dict else out


def set_user_role(
    user_repo: IUserRepository, admin_uid: str, uid: str, role: UserRole, to_dict: bool = True
) -> Dict | UserOut:
    updated = user_repo.set_role(uid, role.value)
    if not updated:
        raise UserNotFound(uid)

    logger.info(f"[ADMIN] {admin_uid} set role={role.value} for uid={uid}")
    out = UserOut.model_validate(updated.model_dump())
    return out.model_dump() if to_dict else out
