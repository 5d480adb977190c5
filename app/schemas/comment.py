from typing import Optional, List, Literal, Union, Annotated
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserOut


class CommentCreate(BaseModel):
    """
    创建顶层评论（作者从 token 中取）
    """
    blog_id: str
    content: str

    model_config = ConfigDict(extra="forbid")


class ReplyCreate(BaseModel):
    """
    回复评论：
    - comment_id 可以是顶层评论，也可以是某条回复（会被挂到它的顶层评论下）
    - reply_to 不传时默认回复被回复评论的作者
    """
    comment_id: str
    content: str
    reply_to: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class CommentLikeIn(BaseModel):
    comment_id: str

    model_config = ConfigDict(extra="forbid")


class CommentRecord(BaseModel):
    """
    仓库层返回的评论原始记录（parent_id 为空即顶层评论）
    """
    cid: str
    blog_id: str
    author_id: str
    parent_id: Optional[str] = None
    reply_to_id: Optional[str] = None
    from_user_name: Optional[str] = None
    to_user_name: Optional[str] = None
    content: str
    like_count: int = 0
    created_at: Optional[datetime] = None
    author: Optional[UserOut] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None


class _CommentBase(BaseModel):
    cid: str
    blog_id: str
    author: Optional[UserOut] = None
    from_user_name: Optional[str] = None
    content: str
    like_count: int = 0
    is_liked: bool = False
    created_at: Optional[datetime] = None


class ReplyOut(_CommentBase):
    """
    回复：必然挂在某个顶层评论下，reply_to 为实际被回复的人
    """
    kind: Literal["reply"] = "reply"
    parent_id: str
    reply_to: Optional[str] = None
    to_user_name: Optional[str] = None


class TopLevelCommentOut(_CommentBase):
    """
    顶层评论：replies 按时间正序，回复不能再有回复
    """
    kind: Literal["top_level"] = "top_level"
    replies: List[ReplyOut] = []


CommentOut = Annotated[Union[TopLevelCommentOut, ReplyOut], Field(discriminator="kind")]


class CommentListOut(BaseModel):
    """
    - comments: 顶层评论，按时间倒序
    - total: 顶层评论数量
    """
    comments: List[TopLevelCommentOut]
    total: int


class LikeToggleOut(BaseModel):
    comment_id: str
    is_liked: bool
    like_count: int


class CommentDeleteOut(BaseModel):
    cid: str
    # 删除的评论条数（顶层评论 = 1 + 回复数）
    deleted_count: int
