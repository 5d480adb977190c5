from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class FavoriteCreate(BaseModel):
    blog_id: str
    category: Optional[str] = None
    note: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class FavoriteOut(BaseModel):
    user_id: str
    blog_id: str
    blog_title: str
    category: str = "default"
    note: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BatchFavoritesOut(BaseModel):
    total: int
    count: int
    items: List[FavoriteOut]


class FavoriteCheckOut(BaseModel):
    blog_id: str
    is_favorited: bool
