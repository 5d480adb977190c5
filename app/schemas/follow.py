from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class FollowRequest(BaseModel):
    """
    关注 / 取关请求体，关注者从 token 中取
    """
    user_id: str               # 目标用户 UID

    model_config = ConfigDict(extra="forbid")


class FollowCreate(BaseModel):
    """
    仓库层创建 / 取消关注
    """
    user_id: str               # 关注者 UID
    followed_user_id: str      # 被关注者 UID

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class FollowOut(BaseModel):
    """
    单条关注关系输出
    """
    user_id: str               # 关注者 UID
    followed_user_id: str      # 被关注者 UID
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RelationUserOut(BaseModel):
    """
    关注列表 / 粉丝列表中的一项：
    - is_following: 当前查看者是否关注了这个人（匿名时恒为 False）
    """
    uid: str
    username: str
    avatar_url: Optional[str] = None
    is_following: bool = False

    model_config = ConfigDict(from_attributes=True)


class RelationshipInfoOut(BaseModel):
    user_id: str
    following_count: int
    followers_count: int
    following: List[RelationUserOut]
    followers: List[RelationUserOut]
    # 当前查看者是否关注了 user_id
    is_following: bool = False


class FollowStatusOut(BaseModel):
    user_id: str
    follow_id: str
    is_following: bool
