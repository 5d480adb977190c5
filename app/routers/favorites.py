from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.favorite import FavoriteCreate, FavoriteOut, BatchFavoritesOut, FavoriteCheckOut

from app.core.auth import CurrentUser, get_current_user
from app.core.biz_response import BizResponse
from app.core.config import settings
from app.service import favorite_svc

from app.storage.database import get_blog_repo, get_favorite_repo
from app.storage.blog.blog_interface import IBlogRepository
from app.storage.favorite.favorite_interface import IFavoriteRepository
from app.core.exceptions import (
    AlreadyFavoritedError,
    BlogNotFound,
    ModerationError,
    NotFavoritedError,
    ValidationError,
)
from app.core.logx import logger

favorites_router = APIRouter(prefix="/favorites", tags=["favorites"])


@favorites_router.post("", response_model=FavoriteOut)
def add_favorite(
    data: FavoriteCreate,
    current_user: CurrentUser = Depends(get_current_user),
    favorite_repo: IFavoriteRepository = Depends(get_favorite_repo),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
):
    """
    收藏博客，博客的 favorite_count +1
    """
    try:
        favorite = favorite_svc.add_favorite(
            favorite_repo=favorite_repo,
            blog_repo=blog_repo,
            current_uid=current_user.uid,
            data=data,
            to_dict=True,
        )
        return BizResponse(data=favorite, msg="favorited", status_code=201)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except BlogNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except AlreadyFavoritedError as e:
        return BizResponse(data=None, msg=str(e), status_code=409)
    except Exception as e:
        logger.exception("add_favorite error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@favorites_router.get("", response_model=BatchFavoritesOut)
def list_favorites(
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    category: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    favorite_repo: IFavoriteRepository = Depends(get_favorite_repo),
):
    try:
        result = favorite_svc.list_favorites(
            favorite_repo=favorite_repo,
            current_uid=current_user.uid,
            page=page,
            page_size=page_size,
            category=category,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("list_favorites error")
        return BizResponse(data=list(), msg=str(e), status_code=500)


@favorites_router.get("/check/{blog_id}", response_model=FavoriteCheckOut)
def check_favorite(
    blog_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    favorite_repo: IFavoriteRepository = Depends(get_favorite_repo),
):
    try:
        result = favorite_svc.check_favorite(
            favorite_repo=favorite_repo, current_uid=current_user.uid, blog_id=blog_id, to_dict=True
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("check_favorite error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@favorites_router.delete("/{blog_id}")
def remove_favorite(
    blog_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    favorite_repo: IFavoriteRepository = Depends(get_favorite_repo),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
):
    """
    取消收藏，博客的 favorite_count -1
    """
    try:
        ok = favorite_svc.remove_favorite(
            favorite_repo=favorite_repo, blog_repo=blog_repo, current_uid=current_user.uid, blog_id=blog_id
        )
        return BizResponse(data=ok, msg="unfavorited")
    except NotFavoritedError as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("remove_favorite error")
        return BizResponse(data=False, msg=str(e), status_code=500)
