from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid
from app.models.base import Base
from app.core.time import now_utc8

class Comment(Base):
    """ 评论表（两层结构）：
        - 顶层评论：parent_id 为 NULL
        - 回复：parent_id 指向顶层评论，reply_to_id 记录实际被回复的人
        回复的回复会被挂到同一个顶层评论下，不会出现第三层

        CREATE TABLE IF NOT EXISTS comments (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            cid VARCHAR(36) UNIQUE,
            blog_id VARCHAR(36) NOT NULL,        -- 所属博客 (FK -> blogs.bid)
            author_id VARCHAR(36) NOT NULL,      -- 评论作者 (FK -> users.uid)
            parent_id VARCHAR(36) NULL,          -- 顶层评论 CID
            reply_to_id VARCHAR(36) NULL,        -- 被回复的用户
            from_user_name VARCHAR(100),         -- 创建时的作者昵称快照
            to_user_name VARCHAR(100),           -- 创建时的被回复者昵称快照
            content TEXT NOT NULL,
            like_count INT DEFAULT 0,            -- 冗余点赞数，每次点赞/取消后按 comment_likes 重算
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
    """

    __tablename__ = "comments"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    cid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    blog_id = Column(String(36), ForeignKey("blogs.bid"), nullable=False)
    author_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    parent_id = Column(String(36), ForeignKey("comments.cid"), nullable=True)
    reply_to_id = Column(String(36), ForeignKey("users.uid"), nullable=True)
    from_user_name = Column(String(100), nullable=True)
    to_user_name = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    author = relationship("User", foreign_keys=[author_id])
    reply_to = relationship("User", foreign_keys=[reply_to_id])

    __table_args__ = (
        Index("idx_comment_blog_parent", "blog_id", "parent_id"),
        Index("idx_comment_parent", "parent_id"),
    )
