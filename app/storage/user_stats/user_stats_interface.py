from typing import Optional, Protocol

from app.schemas.user_stats import UserStatsOut


class IUserStatsRepository(Protocol):
    """
    用户关注/粉丝统计表仓库接口（数据层抽象接口）
    """

    def get_by_user_id(self, user_id: str) -> Optional[UserStatsOut]:
        """根据 user_id 获取统计信息，若不存在返回 None"""
        ...

    def create_for_user(self, user_id: str) -> UserStatsOut:
        """
        为指定用户创建统计记录（如果已存在则直接返回现有记录）
        - 默认 following_count = 0, followers_count = 0
        """
        ...

    def update_following(self, user_id: str, step: int = 1) -> UserStatsOut:
        """
        增加（或减少）关注数：following_count += step
        - step 可以为负数，结果不小于 0
        - 若记录不存在，将先创建后更新
        """
        ...

    def update_followers(self, user_id: str, step: int = 1) -> UserStatsOut:
        """
        增加（或减少）粉丝数：followers_count += step
        - step 可以为负数，结果不小于 0
        - 若记录不存在，将先创建后更新
        """
        ...

    def set_counts(self, user_id: str, following_count: int, followers_count: int) -> UserStatsOut:
        """对账时直接覆盖两个计数"""
        ...
