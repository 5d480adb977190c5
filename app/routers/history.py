from fastapi import APIRouter, Depends, Query

from app.schemas.history import BatchHistoryOut

from app.core.auth import CurrentUser, get_current_user
from app.core.biz_response import BizResponse
from app.core.config import settings
from app.service import history_svc

from app.storage.database import get_history_repo
from app.storage.history.history_interface import IHistoryRepository
from app.core.exceptions import NotFoundError
from app.core.logx import logger

history_router = APIRouter(prefix="/history", tags=["history"])


@history_router.get("", response_model=BatchHistoryOut)
def list_history(
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(get_current_user),
    history_repo: IHistoryRepository = Depends(get_history_repo),
):
    try:
        result = history_svc.list_history(
            history_repo=history_repo,
            current_uid=current_user.uid,
            page=page,
            page_size=page_size,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("list_history error")
        return BizResponse(data=list(), msg=str(e), status_code=500)


@history_router.delete("")
def clear_history(
    current_user: CurrentUser = Depends(get_current_user),
    history_repo: IHistoryRepository = Depends(get_history_repo),
):
    try:
        deleted = history_svc.clear_history(history_repo=history_repo, current_uid=current_user.uid)
        return BizResponse(data={"deleted_count": deleted})
    except Exception as e:
        logger.exception("clear_history error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@history_router.delete("/{blog_id}")
def delete_history(
    blog_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    history_repo: IHistoryRepository = Depends(get_history_repo),
):
    try:
        ok = history_svc.delete_history(history_repo=history_repo, current_uid=current_user.uid, blog_id=blog_id)
        return BizResponse(data=ok)
    except NotFoundError as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("delete_history error")
        return BizResponse(data=False, msg=str(e), status_code=500)
