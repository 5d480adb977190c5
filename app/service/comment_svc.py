from typing import Optional, Dict, List, Set

from app.core.config import settings
from app.core.content_filter import validate_content
from app.core.logx import logger
from app.core.exceptions import (
    BlogNotFound,
    CommentNotFound,
    PermissionDeniedError,
    UserNotFound,
    AlreadyExistsError,
)
from app.models.notification import NotificationType
from app.schemas.comment import (
    CommentOut,
    CommentRecord,
    CommentListOut,
    CommentDeleteOut,
    LikeToggleOut,
    ReplyOut,
    TopLevelCommentOut,
)
from app.service.notification_dispatcher import NotificationDispatcher
from app.storage.blog.blog_interface import IBlogRepository
from app.storage.comment.comment_interface import ICommentRepository
from app.storage.comment_like.comment_like_interface import ICommentLikeRepository
from app.storage.user.user_interface import IUserRepository


def _validate_comment_content(content: str) -> str:
    """空 -> 长度 -> 敏感词，任何查询和写入之前执行"""
    validate_content(
        content,
        field="content",
        max_length=settings.COMMENT_MAX_LENGTH,
        strict_mode=settings.MODERATION_STRICT_MODE,
    )
    return content.strip()


def _to_reply_out(record: CommentRecord, liked: Set[str]) -> ReplyOut:
    return ReplyOut(
        cid=record.cid,
        blog_id=record.blog_id,
        author=record.author,
        from_user_name=record.from_user_name,
        content=record.content,
        like_count=record.like_count,
        is_liked=record.cid in liked,
        created_at=record.created_at,
        parent_id=record.parent_id,
        reply_to=record.reply_to_id,
        to_user_name=record.to_user_name,
    )


def _to_top_level_out(record: CommentRecord, liked: Set[str], replies: List[ReplyOut]) -> TopLevelCommentOut:
    return TopLevelCommentOut(
        cid=record.cid,
        blog_id=record.blog_id,
        author=record.author,
        from_user_name=record.from_user_name,
        content=record.content,
        like_count=record.like_count,
        is_liked=record.cid in liked,
        created_at=record.created_at,
        replies=replies,
    )


def to_comment_out(record: CommentRecord, liked: Optional[Set[str]] = None) -> CommentOut:
    """
    把原始记录转成带标签的输出：顶层评论 / 回复
    """
    liked = liked or set()
    if record.is_top_level:
        return _to_top_level_out(record, liked, [])
    return _to_reply_out(record, liked)


def create_comment(
    comment_repo: ICommentRepository,
    blog_repo: IBlogRepository,
    user_repo: IUserRepository,
    notifier: NotificationDispatcher,
    current_uid: str,
    blog_id: str,
    content: str,
    to_dict: bool = True,
) -> Dict | TopLevelCommentOut:
    """
    创建顶层评论：
    1. 校验内容（空 / 长度 / 敏感词）
    2. 校验作者、博客存在
    3. 写入评论
    4. 博客作者不是自己时通知博客作者
    """
    content = _validate_comment_content(content)

    author = user_repo.get_user_by_uid(current_uid)
    if not author:
        raise UserNotFound(current_uid)

    blog = blog_repo.get_blog(blog_id)
    if not blog:
        raise BlogNotFound(blog_id)

    record = comment_repo.create_comment(
        blog_id=blog_id,
        author_id=current_uid,
        content=content,
        from_user_name=author.username,
    )
    logger.info(f"Created comment cid={record.cid} blog={blog_id} author={current_uid}")

    if blog.user_id != current_uid:
        notifier.notify(
            recipient_id=blog.user_id,
            sender_id=current_uid,
            type=NotificationType.COMMENT,
            related_blog_id=blog_id,
            related_comment_id=record.cid,
            excerpt=content,
        )

    out = to_comment_out(record)
    return out.model_dump() if to_dict else out


def create_reply(
    comment_repo: ICommentRepository,
    user_repo: IUserRepository,
    notifier: NotificationDispatcher,
    current_uid: str,
    comment_id: str,
    content: str,
    reply_to: Optional[str] = None,
    to_dict: bool = True,
) -> Dict | ReplyOut:
    """
    回复评论：
    - 回复的回复同样挂到顶层评论下：parent_id = parent.parent_id or parent.cid
    - reply_to 默认是被回复评论的作者
    - 被回复的人不是自己时发送 reply 通知
    """
    content = _validate_comment_content(content)

    author = user_repo.get_user_by_uid(current_uid)
    if not author:
        raise UserNotFound(current_uid)

    parent = comment_repo.get_comment(comment_id)
    if not parent:
        raise CommentNotFound(comment_id)

    top_level_id = parent.parent_id or parent.cid
    addressee_id = reply_to or parent.author_id

    addressee = user_repo.get_user_by_uid(addressee_id)
    if not addressee:
        raise UserNotFound(addressee_id)

    record = comment_repo.create_comment(
        blog_id=parent.blog_id,
        author_id=current_uid,
        content=content,
        parent_id=top_level_id,
        reply_to_id=addressee_id,
        from_user_name=author.username,
        to_user_name=addressee.username,
    )
    logger.info(f"Created reply cid={record.cid} parent={top_level_id} reply_to={addressee_id}")

    if addressee_id != current_uid:
        notifier.notify(
            recipient_id=addressee_id,
            sender_id=current_uid,
            type=NotificationType.REPLY,
            related_blog_id=parent.blog_id,
            related_comment_id=record.cid,
            excerpt=content,
        )

    out = to_comment_out(record)
    return out.model_dump() if to_dict else out


def toggle_like(
    comment_repo: ICommentRepository,
    like_repo: ICommentLikeRepository,
    notifier: NotificationDispatcher,
    current_uid: str,
    comment_id: str,
    to_dict: bool = True,
) -> Dict | LikeToggleOut:
    """
    点赞 / 取消点赞（切换）：
    - 每次切换后 like_count 按点赞集合重新计算
    - 只有“点赞”这一步会通知评论作者，取消不通知
    """
    comment = comment_repo.get_comment(comment_id)
    if not comment:
        raise CommentNotFound(comment_id)

    if like_repo.exists(comment_id, current_uid):
        like_repo.remove(comment_id, current_uid)
        is_liked = False
    else:
        try:
            like_repo.add(comment_id, current_uid)
        except AlreadyExistsError:
            # 并发的另一次点赞已经写入，结果一致
            logger.warning(f"duplicate like ignored cid={comment_id} user={current_uid}")
        is_liked = True

    like_count = like_repo.count(comment_id)
    comment_repo.set_like_count(comment_id, like_count)

    if is_liked and comment.author_id != current_uid:
        notifier.notify(
            recipient_id=comment.author_id,
            sender_id=current_uid,
            type=NotificationType.LIKE,
            related_blog_id=comment.blog_id,
            related_comment_id=comment_id,
            excerpt=comment.content,
        )

    result = LikeToggleOut(comment_id=comment_id, is_liked=is_liked, like_count=like_count)
    return result.model_dump() if to_dict else result


def delete_comment(
    comment_repo: ICommentRepository,
    like_repo: ICommentLikeRepository,
    current_uid: str,
    is_admin: bool,
    comment_id: str,
    to_dict: bool = True,
) -> Dict | CommentDeleteOut:
    """
    删除评论：
    - 只有作者或管理员可以删除
    - 删除顶层评论会连同所有回复一起删除（N 条回复共删除 N+1 条）
    - 相关点赞记录一并清理
    """
    comment = comment_repo.get_comment(comment_id)
    if not comment:
        raise CommentNotFound(comment_id)

    if comment.author_id != current_uid and not is_admin:
        raise PermissionDeniedError("Only the author or an admin can delete this comment")

    thread_ids = comment_repo.list_thread_ids(comment_id)
    like_repo.delete_by_comments(thread_ids)
    deleted = comment_repo.delete_thread(comment_id)

    logger.info(f"Deleted comment cid={comment_id} by={current_uid} count={deleted}")
    result = CommentDeleteOut(cid=comment_id, deleted_count=deleted)
    return result.model_dump() if to_dict else result


def list_comments(
    comment_repo: ICommentRepository,
    like_repo: ICommentLikeRepository,
    blog_repo: IBlogRepository,
    blog_id: str,
    viewer_id: Optional[str] = None,
    to_dict: bool = True,
) -> Dict | CommentListOut:
    """
    评论列表：
    - 顶层评论按时间倒序，每条下面的回复按时间正序
    - is_liked 相对当前查看者计算，匿名时全为 False
    """
    if not blog_repo.get_blog(blog_id):
        raise BlogNotFound(blog_id)

    top_level = comment_repo.list_top_level(blog_id)
    replies = comment_repo.list_replies([c.cid for c in top_level])

    liked: Set[str] = set()
    if viewer_id:
        all_ids = [c.cid for c in top_level] + [r.cid for r in replies]
        liked = like_repo.liked_comment_ids(viewer_id, all_ids)

    replies_by_parent: Dict[str, List[ReplyOut]] = {}
    for r in replies:
        replies_by_parent.setdefault(r.parent_id, []).append(_to_reply_out(r, liked))

    comments = [
        _to_top_level_out(c, liked, replies_by_parent.get(c.cid, []))
        for c in top_level
    ]
    result = CommentListOut(comments=comments, total=len(comments))
    return result.model_dump() if to_dict else result
