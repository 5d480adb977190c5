from typing import List

from sqlalchemy.orm import Session

from app.models.follow import Follow
from app.schemas.follow import FollowCreate, FollowOut
from app.storage.follow.follow_interface import IFollowRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyFollowRepository(IFollowRepository):
    """
    使用 SQLAlchemy 实现的关注关系仓库
    """

    def __init__(self, db: Session):
        self.db = db

    def _active_query(self):
        """只查询未软删除的关注记录"""
        return self.db.query(Follow).filter(Follow.deleted_at.is_(None))

    def create_follow(self, data: FollowCreate) -> FollowOut:
        """
        创建关注：
        - 如果已存在软删除的记录 => 视为重新关注：deleted_at 置空，created_at 更新为现在
        - 如果已存在未删除记录 => 直接返回
        """
        # 先查是否已有记录（无论软删与否）
        existing = (
            self.db.query(Follow)
            .filter(
                Follow.user_id == data.user_id,
                Follow.followed_user_id == data.followed_user_id,
            )
            .first()
        )

        now = now_utc8()

        if existing:
            if existing.deleted_at is not None:
                with transaction(self.db):
                    existing.deleted_at = None
                    existing.created_at = now
                self.db.refresh(existing)
            return FollowOut.model_validate(existing)

        follow = Follow(
            user_id=data.user_id,
            followed_user_id=data.followed_user_id,
            created_at=now,
            deleted_at=None,
        )

        with transaction(self.db):
            self.db.add(follow)

        self.db.refresh(follow)
        return FollowOut.model_validate(follow)

    def cancel_follow(self, data: FollowCreate) -> bool:
        follow = (
            self._active_query()
            .filter(
                Follow.user_id == data.user_id,
                Follow.followed_user_id == data.followed_user_id,
            )
            .first()
        )
        if not follow:
            return False

        with transaction(self.db):
            follow.deleted_at = now_utc8()

        return True

    def is_following(self, user_id: str, followed_user_id: str) -> bool:
        return (
            self._active_query()
            .filter(
                Follow.user_id == user_id,
                Follow.followed_user_id == followed_user_id,
            )
            .first()
            is not None
        )

    def list_following_ids(self, user_id: str) -> List[str]:
        rows = (
            self._active_query()
            .filter(Follow.user_id == user_id)
            .order_by(Follow.created_at.desc(), Follow._id.desc())
            .all()
        )
        return [f.followed_user_id for f in rows]

    def list_follower_ids(self, user_id: str) -> List[str]:
        rows = (
            self._active_query()
            .filter(Follow.followed_user_id == user_id)
            .order_by(Follow.created_at.desc(), Follow._id.desc())
            .all()
        )
        return [f.user_id for f in rows]

    def count_following(self, user_id: str) -> int:
        return self._active_query().filter(Follow.user_id == user_id).count()

    def count_followers(self, user_id: str) -> int:
        return self._active_query().filter(Follow.followed_user_id == user_id).count()
