from typing import Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from app.models.user_stats import UserStats
from app.schemas.user_stats import UserStatsOut
from app.storage.user_stats.user_stats_interface import IUserStatsRepository
from app.core.db import transaction


def _clamped_step(column, step: int):
    """在数据库端做 +step，结果不小于 0"""
    return case((column + step < 0, 0), else_=column + step)


class SQLAlchemyUserStatsRepository(IUserStatsRepository):
    """
    使用 SQLAlchemy 实现的用户关注/粉丝统计仓库
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_stats_orm(self, user_id: str) -> Optional[UserStats]:
        return (
            self.db.query(UserStats)
            .filter(UserStats.user_id == user_id)
            .first()
        )

    def _get_or_create_stats_orm(self, user_id: str) -> UserStats:
        """
        获取统计记录，如果不存在则在当前事务中创建一条默认记录
        """
        stats = self._get_stats_orm(user_id)
        if stats is None:
            stats = UserStats(user_id=user_id, following_count=0, followers_count=0)
            self.db.add(stats)
            self.db.flush()
        return stats

    def get_by_user_id(self, user_id: str) -> Optional[UserStatsOut]:
        stats = self._get_stats_orm(user_id)
        return UserStatsOut.model_validate(stats) if stats else None

    def create_for_user(self, user_id: str) -> UserStatsOut:
        stats = self._get_stats_orm(user_id)
        if stats is None:
            stats = UserStats(user_id=user_id, following_count=0, followers_count=0)
            with transaction(self.db):
                self.db.add(stats)

            self.db.refresh(stats)

        return UserStatsOut.model_validate(stats)

    def update_following(self, user_id: str, step: int = 1) -> UserStatsOut:
        with transaction(self.db):
            stats = self._get_or_create_stats_orm(user_id)
            stats.following_count = _clamped_step(UserStats.following_count, step)

        self.db.refresh(stats)
        return UserStatsOut.model_validate(stats)

    def update_followers(self, user_id: str, step: int = 1) -> UserStatsOut:
        with transaction(self.db):
            stats = self._get_or_create_stats_orm(user_id)
            stats.followers_count = _clamped_step(UserStats.followers_count, step)

        self.db.refresh(stats)
        return UserStatsOut.model_validate(stats)

    def set_counts(self, user_id: str, following_count: int, followers_count: int) -> UserStatsOut:
        with transaction(self.db):
            stats = self._get_or_create_stats_orm(user_id)
            stats.following_count = following_count
            stats.followers_count = followers_count

        self.db.refresh(stats)
        return UserStatsOut.model_validate(stats)
