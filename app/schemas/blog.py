from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from app.schemas.user import UserOut


class BlogCreate(BaseModel):
    title: str
    content: str

    model_config = ConfigDict(extra="forbid")


class BlogUpdate(BaseModel):
    """
    更新博客：只能改标题和正文，作者不可修改
    """
    title: Optional[str] = None
    content: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class BlogOut(BaseModel):
    bid: str
    user_id: str
    title: str
    content: str
    view_count: int = 0
    favorite_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BlogDetailOut(BlogOut):
    author: Optional[UserOut] = None


class BatchBlogsOut(BaseModel):
    total: int
    count: int
    items: List[BlogDetailOut]

    model_config = ConfigDict(from_attributes=True)
