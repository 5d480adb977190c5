import random

from fastapi import APIRouter, Depends

from app.schemas.user import UserRegister, UserLogin, AuthOut
from app.core.avatar import get_avatar_rng
from app.core.biz_response import BizResponse
from app.service import user_svc

from app.storage.database import get_user_repo, get_usersta_repo
from app.storage.user.user_interface import IUserRepository
from app.storage.user_stats.user_stats_interface import IUserStatsRepository

from app.core.exceptions import (
    AuthError,
    EmailAlreadyRegistered,
    InactiveUserError,
    ModerationError,
    ValidationError,
)
from app.core.logx import logger

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", response_model=AuthOut)
def register(
    data: UserRegister,
    user_repo: IUserRepository = Depends(get_user_repo),
    stats_repo: IUserStatsRepository = Depends(get_usersta_repo),
    rng: random.Random = Depends(get_avatar_rng),
):
    """
    注册：
    - 创建 user 记录（随机头像）
    - 初始化 user_stats（关注数/粉丝数为 0）
    - 返回用户信息 + token
    """
    try:
        result = user_svc.register(
            user_repo=user_repo,
            stats_repo=stats_repo,
            data=data,
            rng=rng,
            to_dict=True,
        )
        return BizResponse(data=result, msg="registered", status_code=201)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except EmailAlreadyRegistered as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except Exception as e:
        logger.exception("register error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@auth_router.post("/login", response_model=AuthOut)
def login(data: UserLogin, user_repo: IUserRepository = Depends(get_user_repo)):
    try:
        result = user_svc.login(user_repo=user_repo, data=data, to_dict=True)
        return BizResponse(data=result, msg="login success")
    except AuthError as e:
        return BizResponse(data=None, msg=str(e), status_code=401)
    except InactiveUserError as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception("login error")
        return BizResponse(data=None, msg=str(e), status_code=500)
