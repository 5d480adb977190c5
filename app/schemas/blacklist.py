from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from app.schemas.user import UserOut


class BlockCreate(BaseModel):
    reason: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class BlacklistOut(BaseModel):
    blocker_id: str
    blocked_id: str
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BlockedUserOut(BaseModel):
    """拉黑列表项：被拉黑用户信息 + 原因 + 时间"""
    user: UserOut
    reason: Optional[str] = None
    created_at: Optional[datetime] = None


class BatchBlacklistOut(BaseModel):
    total: int
    count: int
    items: List[BlockedUserOut]


class BlockCheckOut(BaseModel):
    user_id: str
    # 我是否拉黑了对方
    is_blocked: bool
    # 双方任一方向存在拉黑
    has_block_relation: bool
