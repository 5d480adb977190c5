from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid
from app.models.base import Base
from app.core.time import now_utc8

class Blog(Base):
    """ 博客表

        CREATE TABLE IF NOT EXISTS blogs (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            bid VARCHAR(36) UNIQUE,               -- 博客业务主键（UUID）
            user_id VARCHAR(36) NOT NULL,         -- 作者 (FK -> users.uid)，创建后不可修改
            title VARCHAR(100) NOT NULL,
            content TEXT NOT NULL,
            view_count INT DEFAULT 0,             -- 浏览数，每次查看详情 +1
            favorite_count INT DEFAULT 0,         -- 收藏数，与 favorites 表成对增减
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
    """

    __tablename__ = "blogs"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    bid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    favorite_count = Column(Integer, default=0, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)
    # 只在编辑标题/正文时刷新，浏览数和收藏数变化不算更新
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    author = relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        Index("idx_blog_user", "user_id"),
    )
