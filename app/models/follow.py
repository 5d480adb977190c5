from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from app.models.base import Base
from app.core.time import now_utc8

class Follow(Base):
    """ 用户关注关系表：一条有效记录同时表示 A.following 含 B、B.followers 含 A

        CREATE TABLE IF NOT EXISTS follows (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL,                    -- 关注者ID (FK -> users.uid)
            followed_user_id VARCHAR(36) NOT NULL,           -- 被关注者ID (FK -> users.uid)
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            deleted_at TIMESTAMP NULL,                       -- 软删除时间戳（取消关注）
            CONSTRAINT uq_user_follow UNIQUE (user_id, followed_user_id)
        );
        CREATE INDEX idx_followed_user ON follows (followed_user_id);
    """

    __tablename__ = "follows"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    # 关注者ID
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    # 被关注者ID
    followed_user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)
    # 软删除时间戳（用于取消关注，重新关注时置空）
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    user = relationship("User", foreign_keys=[user_id])
    followed_user = relationship("User", foreign_keys=[followed_user_id])

    __table_args__ = (
        # 联合唯一约束：确保每个用户只能关注一次某个用户
        UniqueConstraint("user_id", "followed_user_id", name="uq_user_follow"),
        Index("idx_followed_user", "followed_user_id"),
    )
