from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint
from app.models.base import Base
from app.core.time import now_utc8

class UserStats(Base):
    """ 用户关注统计表，记录每个用户的关注数和粉丝数（follows 表的冗余计数）

        CREATE TABLE IF NOT EXISTS user_stats (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL,               -- 用户 ID (FK -> users.uid)
            following_count INT DEFAULT 0,              -- 关注数
            followers_count INT DEFAULT 0,              -- 粉丝数
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id)
        );
    """

    __tablename__ = "user_stats"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    following_count = Column(Integer, default=0, nullable=False)
    followers_count = Column(Integer, default=0, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc8, onupdate=now_utc8, nullable=False)

    __table_args__ = (
        # 确保每个用户只有一条记录（unique 自带索引）
        UniqueConstraint("user_id", name="unique_user_stats"),
    )
