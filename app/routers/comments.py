from typing import Optional

from fastapi import APIRouter, Depends

from app.schemas.comment import (
    CommentCreate,
    ReplyCreate,
    CommentLikeIn,
    CommentListOut,
    CommentDeleteOut,
    LikeToggleOut,
    ReplyOut,
    TopLevelCommentOut,
)
from app.core.auth import CurrentUser, get_current_user, get_current_user_optional
from app.core.biz_response import BizResponse
from app.service import comment_svc
from app.service.notification_dispatcher import NotificationDispatcher, get_notifier

from app.storage.database import (
    get_user_repo,
    get_blog_repo,
    get_comment_repo,
    get_comment_like_repo,
)
from app.storage.user.user_interface import IUserRepository
from app.storage.blog.blog_interface import IBlogRepository
from app.storage.comment.comment_interface import ICommentRepository
from app.storage.comment_like.comment_like_interface import ICommentLikeRepository

from app.core.exceptions import (
    BlogNotFound,
    CommentNotFound,
    ModerationError,
    PermissionDeniedError,
    UserNotFound,
    ValidationError,
)
from app.core.logx import logger

comments_router = APIRouter(prefix="/comment", tags=["comment"])


@comments_router.post("/create", response_model=TopLevelCommentOut)
def create_comment(
    data: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    user_repo: IUserRepository = Depends(get_user_repo),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    发表顶层评论：
    - 内容校验（空 / 长度 / 敏感词）
    - 校验博客是否存在
    - 博客作者不是自己时通知博客作者
    """
    try:
        comment = comment_svc.create_comment(
            comment_repo=comment_repo,
            blog_repo=blog_repo,
            user_repo=user_repo,
            notifier=notifier,
            current_uid=current_user.uid,
            blog_id=data.blog_id,
            content=data.content,
            to_dict=True,
        )
        return BizResponse(data=comment, msg="comment created", status_code=201)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except (UserNotFound, BlogNotFound) as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("create_comment error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@comments_router.post("/reply", response_model=ReplyOut)
def create_reply(
    data: ReplyCreate,
    current_user: CurrentUser = Depends(get_current_user),
    user_repo: IUserRepository = Depends(get_user_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    回复评论（回复的回复会挂到同一个顶层评论下）
    """
    try:
        reply = comment_svc.create_reply(
            comment_repo=comment_repo,
            user_repo=user_repo,
            notifier=notifier,
            current_uid=current_user.uid,
            comment_id=data.comment_id,
            content=data.content,
            reply_to=data.reply_to,
            to_dict=True,
        )
        return BizResponse(data=reply, msg="reply created", status_code=201)
    except ValidationError as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except ModerationError as e:
        return BizResponse(data={"found_words": e.found_words}, msg=str(e), status_code=400, error="ModerationError")
    except (UserNotFound, CommentNotFound) as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("create_reply error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@comments_router.get("", response_model=CommentListOut)
def list_comments(
    blog_id: str,
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
    blog_repo: IBlogRepository = Depends(get_blog_repo),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ICommentLikeRepository = Depends(get_comment_like_repo),
):
    """
    评论列表（匿名可访问）：
    - 顶层评论按时间倒序，回复按时间正序
    - 登录时 is_liked 表示当前用户是否点过赞
    """
    try:
        result = comment_svc.list_comments(
            comment_repo=comment_repo,
            like_repo=like_repo,
            blog_repo=blog_repo,
            blog_id=blog_id,
            viewer_id=current_user.uid if current_user else None,
            to_dict=True,
        )
        return BizResponse(data=result)
    except BlogNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("list_comments error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@comments_router.delete("/{cid}", response_model=CommentDeleteOut)
def delete_comment(
    cid: str,
    current_user: CurrentUser = Depends(get_current_user),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ICommentLikeRepository = Depends(get_comment_like_repo),
):
    """
    删除评论：作者或管理员；顶层评论连同回复一起删除
    """
    try:
        result = comment_svc.delete_comment(
            comment_repo=comment_repo,
            like_repo=like_repo,
            current_uid=current_user.uid,
            is_admin=current_user.is_admin,
            comment_id=cid,
            to_dict=True,
        )
        return BizResponse(data=result, msg="comment deleted")
    except CommentNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except PermissionDeniedError as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception("delete_comment error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@comments_router.post("/like", response_model=LikeToggleOut)
def toggle_like(
    data: CommentLikeIn,
    current_user: CurrentUser = Depends(get_current_user),
    comment_repo: ICommentRepository = Depends(get_comment_repo),
    like_repo: ICommentLikeRepository = Depends(get_comment_like_repo),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    点赞 / 取消点赞（切换），只有点赞时通知评论作者
    """
    try:
        result = comment_svc.toggle_like(
            comment_repo=comment_repo,
            like_repo=like_repo,
            notifier=notifier,
            current_uid=current_user.uid,
            comment_id=data.comment_id,
            to_dict=True,
        )
        return BizResponse(data=result, msg="liked" if result["is_liked"] else "unliked")
    except CommentNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("toggle_like error")
        return BizResponse(data=None, msg=str(e), status_code=500)
