from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.blog import BlogCreate, BlogUpdate, BlogOut, BlogDetailOut, BatchBlogsOut
from app.models.history import VisitSource

from app.core.auth import CurrentUser, get_current_user, get_current_user_optional
from app.core.biz_response import BizResponse
from app.core.config import settings
from app.service import blog_svc

from app.storage.database import (
    get_blog_repo,
    get_comment_repo,
    get_comment_like_repo,
    get_favorite_repo,
    get_history_repo,
)
from app.storage.blog.blog_interface import IBlogRepository
from app.storage.comment.comment_interface import ICommentRepository
from app.storage.comment_like.comment_like_interface import ICommentLikeRepository
from app.storage.favorite.favorite_interface import IFavoriteRepository
from app.storage.history.history_interface import IHistoryRepository
from app.core.exceptions import (
    BlogNotFound,
    ModerationError,
    PermissionDeniedError,
    ValidationError,
)
from app.core.logx import logger

blogs_router = APIRouter(prefix="/blogs", tags=["blogs"])


@blogs_router.get("", response_model=BatchBlogsOut)
def list_blogs(
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    user_id: Optional[str] = None,
    sort_latest: bool = True,
    blog_repo: IBlogRepository = Depends(get_blog_repo),
):
    """
    博客列表：支持关键字搜索、按作者过滤、最新 / 最热排序
    """
    try:
        result = blog_svc.list_blogs(
            blog_repo=blog_repo,
            page=page,
            page_size=page_size,
            search=search,
            user_id=user_id,
            sort_latest=sort_latest,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception("list_blogs error")
        return BizResponse(data=list(), msg=str(e), status_code=500)


@blogs_router.post("", response_model=BlogOut)
def create_blog(
    data: BlogCreate,
    current_user: CurrentUser = Depends(get_current_user),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
):
    try:
        blog = blog_svc.create_blog(blog_repo=blog_repo, current_uid=current_user.uid, data=data, to_dict=True)
        return BizResponse(data=blog, msg="created", status_code=201)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except Exception as e:
        logger.exception("create_blog error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@blogs_router.get("/{bid}", response_model=BlogDetailOut)
def get_blog(
    bid: str,
    source: VisitSource = VisitSource.DIRECT,
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
    history_repo: IHistoryRepository = Depends(get_history_repo),
):
    """
    博客详情：浏览数 +1，登录用户记录浏览历史
    """
    try:
        blog = blog_svc.get_blog_detail(
            blog_repo=blog_repo,
            history_repo=history_repo,
            bid=bid,
            viewer_id=current_user.uid if current_user else None,
            source=source,
            to_dict=True,
        )
        return BizResponse(data=blog)
    except BlogNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("get_blog error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@blogs_router.put("/{bid}", response_model=BlogOut)
def update_blog(
    bid: str,
    data: BlogUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
):
    try:
        blog = blog_svc.update_blog(
            blog_repo=blog_repo,
            current_uid=current_user.uid,
            is_admin=current_user.is_admin,
            bid=bid,
            data=data,
            to_dict=True,
        )
        return BizResponse(data=blog)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except PermissionDeniedError as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except BlogNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("update_blog error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@blogs_router.delete("/{bid}")
def delete_blog(
    bid: str,
    current_user: CurrentUser = Depends(get_current_user),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ICommentLikeRepository = Depends(get_comment_like_repo),
    favorite_repo: IFavoriteRepository = Depends(get_favorite_repo),
    history_repo: IHistoryRepository = Depends(get_history_repo),
):
    """
    删除博客：级联删除评论、收藏、浏览记录
    """
    try:
        ok = blog_svc.delete_blog(
            blog_repo=blog_repo,
            comment_repo=comment_repo,
            like_repo=like_repo,
            favorite_repo=favorite_repo,
            history_repo=history_repo,
            current_uid=current_user.uid,
            is_admin=current_user.is_admin,
            bid=bid,
        )
        return BizResponse(data=ok, msg="deleted")
    except PermissionDeniedError as e:
        return BizResponse(data=False, msg=str(e), status_code=403)
    except BlogNotFound as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("delete_blog error")
        return BizResponse(data=False, msg=str(e), status_code=500)
