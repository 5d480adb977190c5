from enum import Enum
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint
from app.models.base import Base
from app.core.time import now_utc8

class VisitSource(str, Enum):
    DIRECT = "direct"
    SEARCH = "search"
    RECOMMENDATION = "recommendation"
    SHARE = "share"

class History(Base):
    """ 浏览记录：每个 (用户, 博客) 一条，重复访问只刷新 visited_at

        CREATE TABLE IF NOT EXISTS histories (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL,
            blog_id VARCHAR(36) NOT NULL,
            blog_title VARCHAR(100) NOT NULL,
            source VARCHAR(20) DEFAULT 'direct',
            visited_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_history UNIQUE (user_id, blog_id)
        );
    """

    __tablename__ = "histories"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    blog_id = Column(String(36), ForeignKey("blogs.bid"), nullable=False)
    blog_title = Column(String(100), nullable=False)
    source = Column(String(20), nullable=False, default=VisitSource.DIRECT.value)
    visited_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    __table_args__ = (
        UniqueConstraint("user_id", "blog_id", name="uq_history"),
    )
