from typing import Optional, Dict

from app.core.config import settings
from app.core.content_filter import validate_content
from app.core.logx import logger
from app.core.exceptions import BlogNotFound, PermissionDeniedError
from app.models.history import VisitSource
from app.schemas.blog import BlogCreate, BlogUpdate, BlogOut, BlogDetailOut, BatchBlogsOut
from app.storage.blog.blog_interface import IBlogRepository
from app.storage.comment.comment_interface import ICommentRepository
from app.storage.comment_like.comment_like_interface import ICommentLikeRepository
from app.storage.favorite.favorite_interface import IFavoriteRepository
from app.storage.history.history_interface import IHistoryRepository


def _validate_blog(title: Optional[str], content: Optional[str], partial: bool = False) -> None:
    """标题和正文各自按 空 -> 长度 -> 敏感词 校验，更新时只校验传了的字段"""
    if title is not None or not partial:
        validate_content(
            title,
            field="title",
            max_length=settings.BLOG_TITLE_MAX_LENGTH,
            strict_mode=settings.MODERATION_STRICT_MODE,
        )
    if content is not None or not partial:
        validate_content(
            content,
            field="content",
            max_length=settings.BLOG_CONTENT_MAX_LENGTH,
            strict_mode=settings.MODERATION_STRICT_MODE,
        )


def _get_owned_blog(blog_repo: IBlogRepository, bid: str, current_uid: str, is_admin: bool) -> BlogDetailOut:
    blog = blog_repo.get_blog(bid)
    if not blog:
        raise BlogNotFound(bid)
    if blog.user_id != current_uid and not is_admin:
        raise PermissionDeniedError("Only the author or an admin can modify this blog")
    return blog


def create_blog(blog_repo: IBlogRepository, current_uid: str, data: BlogCreate, to_dict: bool = True) -> Dict | BlogOut:
    _validate_blog(data.title, data.content)

    blog = blog_repo.create_blog(current_uid, BlogCreate(title=data.title.strip(), content=data.content))
    logger.info(f"Created blog bid={blog.bid} author={current_uid}")
    return blog.model_dump() if to_dict else blog


def list_blogs(
    blog_repo: IBlogRepository,
    page: int = 0,
    page_size: int = 10,
    search: Optional[str] = None,
    user_id: Optional[str] = None,
    sort_latest: bool = True,
    to_dict: bool = True,
) -> Dict | BatchBlogsOut:
    result = blog_repo.list_blogs(
        page=page,
        page_size=page_size,
        search=search.strip() if search else None,
        user_id=user_id,
        sort_latest=sort_latest,
    )
    return result.model_dump() if to_dict else result


def get_blog_detail(
    blog_repo: IBlogRepository,
    history_repo: IHistoryRepository,
    bid: str,
    viewer_id: Optional[str] = None,
    source: VisitSource = VisitSource.DIRECT,
    to_dict: bool = True,
) -> Dict | BlogDetailOut:
    """
    博客详情：
    - 每次调用 view_count 恰好 +1
    - 登录用户顺带记一条浏览记录
    """
    blog = blog_repo.get_blog(bid)
    if not blog:
        raise BlogNotFound(bid)

    counted = blog_repo.increment_view(bid)
    blog.view_count = counted.view_count

    if viewer_id:
        history_repo.upsert_visit(viewer_id, bid, blog.title, source.value)

    return blog.model_dump() if to_dict else blog


def update_blog(
    blog_repo: IBlogRepository,
    current_uid: str,
    is_admin: bool,
    bid: str,
    data: BlogUpdate,
    to_dict: bool = True,
) -> Dict | BlogOut:
    """
    更新博客：只有作者或管理员，作者本身不可变更
    """
    _validate_blog(data.title, data.content, partial=True)
    _get_owned_blog(blog_repo, bid, current_uid, is_admin)

    updated = blog_repo.update_blog(bid, data)
    if not updated:
        raise BlogNotFound(bid)

    logger.info(f"Updated blog bid={bid} by={current_uid}")
    return updated.model_dump() if to_dict else updated


def delete_blog(
    blog_repo: IBlogRepository,
    comment_repo: ICommentRepository,
    like_repo: ICommentLikeRepository,
    favorite_repo: IFavoriteRepository,
    history_repo: IHistoryRepository,
    current_uid: str,
    is_admin: bool,
    bid: str,
) -> bool:
    """
    删除博客：级联删除评论（含回复和点赞）、收藏、浏览记录
    """
    _get_owned_blog(blog_repo, bid, current_uid, is_admin)

    like_repo.delete_by_comments(comment_repo.list_ids_by_blog(bid))
    comments = comment_repo.delete_by_blog(bid)
    favorites = favorite_repo.delete_by_blog(bid)
    history_repo.delete_by_blog(bid)

    ok = blog_repo.delete_blog(bid)
    logger.info(f"Deleted blog bid={bid} by={current_uid} comments={comments} favorites={favorites}")
    return ok
