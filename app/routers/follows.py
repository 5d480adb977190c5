from typing import Optional

from fastapi import APIRouter, Depends

from app.schemas.follow import FollowRequest, FollowOut, RelationshipInfoOut, FollowStatusOut

from app.core.auth import CurrentUser, get_current_user, get_current_user_optional
from app.core.biz_response import BizResponse
from app.service import follow_svc
from app.service.notification_dispatcher import NotificationDispatcher, get_notifier

from app.storage.database import (
    get_user_repo,
    get_usersta_repo,
    get_follow_repo,
)
from app.storage.user_stats.user_stats_interface import IUserStatsRepository
from app.storage.follow.follow_interface import IFollowRepository
from app.storage.user.user_interface import IUserRepository
from app.core.exceptions import (
    UserNotFound,
    FollowYourselfError,
    AlreadyFollowingError,
    NotFollowingError,
    ValidationError,
)
from app.core.logx import logger

follows_router = APIRouter(prefix="/follow", tags=["follow"])


@follows_router.post("/follow", response_model=FollowOut)
def follow_user(
    data: FollowRequest,
    current_user: CurrentUser = Depends(get_current_user),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    stats_repo: IUserStatsRepository = Depends(get_usersta_repo),
    user_repo: IUserRepository = Depends(get_user_repo),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    关注用户：
    - 当前用户关注 data.user_id
    - 更新双方的关注数/粉丝数，并通知对方
    """
    try:
        follow = follow_svc.follow_user(
            follow_repo=follow_repo,
            stats_repo=stats_repo,
            user_repo=user_repo,
            notifier=notifier,
            current_uid=current_user.uid,
            target_uid=data.user_id,
            to_dict=True,
        )
        return BizResponse(data=follow, msg="followed")
    except FollowYourselfError as e:
        return BizResponse(data=None, msg=str(e), status_code=400, error="SelfReferenceError")
    except AlreadyFollowingError as e:
        return BizResponse(data=None, msg=str(e), status_code=400, error="AlreadyExistsError")
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=400, error="NotFoundError")
    except Exception as e:
        logger.exception("follow_user error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@follows_router.post("/unfollow")
def cancel_follow(
    data: FollowRequest,
    current_user: CurrentUser = Depends(get_current_user),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    stats_repo: IUserStatsRepository = Depends(get_usersta_repo),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    """
    取消关注：
    - 更新双方的关注数/粉丝数
    """
    try:
        ok = follow_svc.cancel_follow(
            follow_repo=follow_repo,
            stats_repo=stats_repo,
            user_repo=user_repo,
            current_uid=current_user.uid,
            target_uid=data.user_id,
        )
        return BizResponse(data=ok, msg="unfollowed")
    except (UserNotFound, NotFollowingError) as e:
        return BizResponse(data=False, msg=str(e), status_code=400, error="NotFoundError")
    except Exception as e:
        logger.exception("cancel_follow error")
        return BizResponse(data=False, msg=str(e), status_code=500)


@follows_router.get("/info", response_model=RelationshipInfoOut)
def relationship_info(
    user_id: Optional[str] = None,
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
    follow_repo: IFollowRepository = Depends(get_follow_repo),
    stats_repo: IUserStatsRepository = Depends(get_usersta_repo),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    """
    关注 / 粉丝列表，匿名可访问（此时 is_following 全为 False）
    """
    try:
        info = follow_svc.get_relationship_info(
            follow_repo=follow_repo,
            stats_repo=stats_repo,
            user_repo=user_repo,
            user_id=user_id,
            viewer_id=current_user.uid if current_user else None,
            to_dict=True,
        )
        return BizResponse(data=info)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("relationship_info error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@follows_router.get("/status", response_model=FollowStatusOut)
def follow_status(
    user_id: str,
    follow_id: str,
    follow_repo: IFollowRepository = Depends(get_follow_repo),
):
    """
    user_id 是否关注了 follow_id
    """
    try:
        status = follow_svc.get_follow_status(
            follow_repo=follow_repo, user_id=user_id, follow_id=follow_id, to_dict=True
        )
        return BizResponse(data=status)
    except Exception as e:
        logger.exception("follow_status error")
        return BizResponse(data=None, msg=str(e), status_code=500)
