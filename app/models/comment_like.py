from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint
from app.models.base import Base
from app.core.time import now_utc8

class CommentLike(Base):
    """ 评论点赞集合：一行代表 user_id 在 comment_id 的点赞集合中

        CREATE TABLE IF NOT EXISTS comment_likes (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            comment_id VARCHAR(36) NOT NULL,
            user_id VARCHAR(36) NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_comment_like UNIQUE (comment_id, user_id)
        );
    """

    __tablename__ = "comment_likes"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(String(36), ForeignKey("comments.cid"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="uq_comment_like"),
    )
