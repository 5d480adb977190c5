from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from app.models.history import VisitSource


class HistoryOut(BaseModel):
    user_id: str
    blog_id: str
    blog_title: str
    source: VisitSource = VisitSource.DIRECT
    visited_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BatchHistoryOut(BaseModel):
    total: int
    count: int
    items: List[HistoryOut]
