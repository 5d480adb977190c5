from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint
from app.models.base import Base
from app.core.time import now_utc8

class Favorite(Base):
    """ 收藏表：每个用户对同一篇博客只能收藏一次

        CREATE TABLE IF NOT EXISTS favorites (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL,
            blog_id VARCHAR(36) NOT NULL,
            blog_title VARCHAR(100) NOT NULL,   -- 收藏时的标题快照
            category VARCHAR(50) DEFAULT 'default',
            note VARCHAR(500),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_favorite UNIQUE (user_id, blog_id)
        );
    """

    __tablename__ = "favorites"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    blog_id = Column(String(36), ForeignKey("blogs.bid"), nullable=False)
    blog_title = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, default="default")
    note = Column(String(500), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    __table_args__ = (
        UniqueConstraint("user_id", "blog_id", name="uq_favorite"),
    )
