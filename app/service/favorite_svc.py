from typing import Optional, Dict

from app.core.config import settings
from app.core.content_filter import validate_content
from app.core.logx import logger
from app.core.exceptions import (
    AlreadyExistsError,
    AlreadyFavoritedError,
    BizError,
    BlogNotFound,
    NotFavoritedError,
    UnexpectedError,
)
from app.schemas.favorite import FavoriteCreate, FavoriteOut, BatchFavoritesOut, FavoriteCheckOut
from app.storage.blog.blog_interface import IBlogRepository
from app.storage.favorite.favorite_interface import IFavoriteRepository

NOTE_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 50


def _apply_favorite_count(blog_repo: IBlogRepository, blog_id: str, step: int) -> None:
    """
    收藏记录写成功之后更新博客的 favorite_count，失败时记 [RECONCILE] 日志再抛出
    """
    try:
        blog_repo.update_favorite_count(blog_id, step=step)
    except BizError as e:
        logger.error(f"[RECONCILE] favorite_count out of sync for blog {blog_id} step={step}: {e}")
        raise UnexpectedError("Favorite saved but counter failed to update.") from e


def add_favorite(
    favorite_repo: IFavoriteRepository,
    blog_repo: IBlogRepository,
    current_uid: str,
    data: FavoriteCreate,
    to_dict: bool = True,
) -> Dict | FavoriteOut:
    for field, value, limit in (
        ("note", data.note, NOTE_MAX_LENGTH),
        ("category", data.category, CATEGORY_MAX_LENGTH),
    ):
        validate_content(
            value,
            field=field,
            max_length=limit,
            strict_mode=settings.MODERATION_STRICT_MODE,
            allow_empty=True,
        )

    blog = blog_repo.get_blog(data.blog_id)
    if not blog:
        raise BlogNotFound(data.blog_id)

    if favorite_repo.exists(current_uid, data.blog_id):
        raise AlreadyFavoritedError()

    try:
        favorite = favorite_repo.create(
            user_id=current_uid,
            blog_id=data.blog_id,
            blog_title=blog.title,
            category=data.category,
            note=data.note,
        )
    except AlreadyExistsError as e:
        raise AlreadyFavoritedError() from e

    _apply_favorite_count(blog_repo, data.blog_id, step=1)
    logger.info(f"{current_uid} favorited blog {data.blog_id}")
    return favorite.model_dump() if to_dict else favorite


def remove_favorite(
    favorite_repo: IFavoriteRepository,
    blog_repo: IBlogRepository,
    current_uid: str,
    blog_id: str,
) -> bool:
    if not favorite_repo.delete(current_uid, blog_id):
        raise NotFavoritedError()

    _apply_favorite_count(blog_repo, blog_id, step=-1)
    logger.info(f"{current_uid} unfavorited blog {blog_id}")
    return True


def list_favorites(
    favorite_repo: IFavoriteRepository,
    current_uid: str,
    page: int = 0,
    page_size: int = 10,
    category: Optional[str] = None,
    to_dict: bool = True,
) -> Dict | BatchFavoritesOut:
    result = favorite_repo.list_by_user(current_uid, page=page, page_size=page_size, category=category)
    return result.model_dump() if to_dict else result


def check_favorite(
    favorite_repo: IFavoriteRepository, current_uid: str, blog_id: str, to_dict: bool = True
) -> Dict | FavoriteCheckOut:
    result = FavoriteCheckOut(blog_id=blog_id, is_favorited=favorite_repo.exists(current_uid, blog_id))
    return result.model_dump() if to_dict else result
