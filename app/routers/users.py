from fastapi import APIRouter, Depends

from app.schemas.user import (
    UserUpdate,
    UserPasswordUpdate,
    UserStatusUpdate,
    UserRoleUpdate,
    UserProfileOut,
    UserPrivateOut,
    UserOut,
)
from app.schemas.user_stats import UserStatsOut

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.core.biz_response import BizResponse
from app.service import user_svc, follow_svc

from app.storage.database import (
    get_user_repo,
    get_usersta_repo,
    get_follow_repo,
)
from app.storage.user.user_interface import IUserRepository
from app.storage.user_stats.user_stats_interface import IUserStatsRepository
from app.storage.follow.follow_interface import IFollowRepository

from app.core.exceptions import (
    UserNotFound,
    PasswordMismatchError,
    ValidationError,
    ModerationError,
)
from app.core.logx import logger

users_router = APIRouter(prefix="/users", tags=["users"])


@users_router.get("/me", response_model=UserPrivateOut)
def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    try:
        me = user_svc.get_me(user_repo=user_repo, uid=current_user.uid, to_dict=True)
        return BizResponse(data=me)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("get_me error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@users_router.put("/me", response_model=UserPrivateOut)
def update_me(
    data: UserUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    """
    更新自己的资料（昵称 / 头像）
    """
    try:
        updated = user_svc.update_user(user_repo=user_repo, uid=current_user.uid, data=data, to_dict=True)
        return BizResponse(data=updated)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("update_me error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@users_router.put("/me/password")
def change_password(
    data: UserPasswordUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    try:
        ok = user_svc.change_password(user_repo=user_repo, uid=current_user.uid, data=data)
        return BizResponse(data=ok, msg="password updated")
    except (PasswordMismatchError, ValidationError) as e:
        return BizResponse(data=False, msg=str(e), status_code=400)
    except UserNotFound as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("change_password error")
        return BizResponse(data=False, msg=str(e), status_code=500)


@users_router.get("/{uid}", response_model=UserProfileOut)
def get_user_profile(
    uid: str,
    user_repo: IUserRepository = Depends(get_user_repo),
    stats_repo: IUserStatsRepository = Depends(get_usersta_repo),
):
    """
    用户主页：基础信息 + 关注数 / 粉丝数
    """
    try:
        profile = user_svc.get_user_profile(user_repo=user_repo, stats_repo=stats_repo, uid=uid, to_dict=True)
        return BizResponse(data=profile)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("get_user_profile error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@users_router.put("/{uid}/status", response_model=UserOut)
def set_user_status(
    uid: str,
    data: UserStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    """
    管理员启用 / 停用账号
    """
    try:
        user = user_svc.set_user_active(
            user_repo=user_repo, admin_uid=admin.uid, uid=uid, is_active=data.is_active, to_dict=True
        )
        return BizResponse(data=user)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("set_user_status error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@users_router.put("/{uid}/role", response_model=UserOut)
def set_user_role(
    uid: str,
    data: UserRoleUpdate,
    admin: CurrentUser = Depends(require_admin),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    try:
        user = user_svc.set_user_role(user_repo=user_repo, admin_uid=admin.uid, uid=uid, role=data.role, to_dict=True)
        return BizResponse(data=user)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("set_user_role error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@users_router.post("/{uid}/stats/reconcile", response_model=UserStatsOut)
def reconcile_user_stats(
    uid: str,
    admin: CurrentUser = Depends(require_admin),
    user_repo: IUserRepository = Depends(get_user_repo),
    stats_repo: IUserStatsRepository = Depends(get_usersta_repo),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
):
    """
    管理员对账：按关注记录重算关注数 / 粉丝数
    """
    try:
        stats = follow_svc.reconcile_user_stats(
            follow_repo=follow_repo,
            stats_repo=stats_repo,
            user_repo=user_repo,
            uid=uid,
            to_dict=True,
        )
        return BizResponse(data=stats)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("reconcile_user_stats error")
        return BizResponse(data=None, msg=str(e), status_code=500)
