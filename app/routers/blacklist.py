from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.blacklist import BlockCreate, BlacklistOut, BatchBlacklistOut, BlockCheckOut

from app.core.auth import CurrentUser, get_current_user
from app.core.biz_response import BizResponse
from app.core.config import settings
from app.service import blacklist_svc

from app.storage.database import get_blacklist_repo, get_user_repo
from app.storage.blacklist.blacklist_interface import IBlacklistRepository
from app.storage.user.user_interface import IUserRepository
from app.core.exceptions import (
    AlreadyBlockedError,
    BlockYourselfError,
    NotBlockedError,
    ModerationError,
    UserNotFound,
    ValidationError,
)
from app.core.logx import logger

blacklist_router = APIRouter(prefix="/block", tags=["blacklist"])


@blacklist_router.get("", response_model=BatchBlacklistOut)
def list_blocked(
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(get_current_user),
    blacklist_repo: IBlacklistRepository = Depends(get_blacklist_repo),
):
    """
    我的黑名单，按拉黑时间倒序
    """
    try:
        result = blacklist_svc.list_blocked(
            blacklist_repo=blacklist_repo,
            blocker_id=current_user.uid,
            page=page,
            page_size=page_size,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("list_blocked error")
        return BizResponse(data=list(), msg=str(e), status_code=500)


@blacklist_router.get("/check/{uid}", response_model=BlockCheckOut)
def check_block(
    uid: str,
    current_user: CurrentUser = Depends(get_current_user),
    blacklist_repo: IBlacklistRepository = Depends(get_blacklist_repo),
):
    try:
        result = blacklist_svc.check_block(
            blacklist_repo=blacklist_repo,
            current_uid=current_user.uid,
            target_uid=uid,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("check_block error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@blacklist_router.post("/{uid}", response_model=BlacklistOut)
def block_user(
    uid: str,
    data: Optional[BlockCreate] = None,
    current_user: CurrentUser = Depends(get_current_user),
    blacklist_repo: IBlacklistRepository = Depends(get_blacklist_repo),
    user_repo: IUserRepository = Depends(get_user_repo),
):
    """
    拉黑用户（不影响已有的关注关系）
    """
    try:
        record = blacklist_svc.block_user(
            blacklist_repo=blacklist_repo,
            user_repo=user_repo,
            blocker_id=current_user.uid,
            blocked_id=uid,
            reason=data.reason if data else None,
            to_dict=True,
        )
        return BizResponse(data=record, msg="blocked")
    except BlockYourselfError as e:
        return BizResponse(data=None, msg=str(e), status_code=400, error="SelfReferenceError")
    except AlreadyBlockedError as e:
        return BizResponse(data=None, msg=str(e), status_code=400, error="AlreadyExistsError")
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("block_user error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@blacklist_router.delete("/{uid}")
def unblock_user(
    uid: str,
    current_user: CurrentUser = Depends(get_current_user),
    blacklist_repo: IBlacklistRepository = Depends(get_blacklist_repo),
):
    try:
        ok = blacklist_svc.unblock_user(blacklist_repo=blacklist_repo, blocker_id=current_user.uid, blocked_id=uid)
        return BizResponse(data=ok, msg="unblocked")
    except NotBlockedError as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("unblock_user error")
        return BizResponse(data=False, msg=str(e), status_code=500)
