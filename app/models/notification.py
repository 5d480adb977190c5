from enum import Enum
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid
from app.models.base import Base
from app.core.time import now_utc8

class NotificationType(str, Enum):
    COMMENT = "comment"
    REPLY = "reply"
    LIKE = "like"
    FOLLOW = "follow"
    SYSTEM = "system"

class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

class Notification(Base):
    """ 通知表：只由通知分发器在其他写操作成功后创建，接收者只能改已读状态或删除

        CREATE TABLE IF NOT EXISTS notifications (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            nid VARCHAR(36) UNIQUE,
            recipient_id VARCHAR(36) NOT NULL,
            sender_id VARCHAR(36) NOT NULL,
            type VARCHAR(20) NOT NULL,            -- comment / reply / like / follow / system
            title VARCHAR(100) NOT NULL,
            content VARCHAR(500) NOT NULL,
            related_blog_id VARCHAR(36) NULL,
            related_comment_id VARCHAR(36) NULL,
            is_read BOOLEAN DEFAULT FALSE,
            read_at TIMESTAMP NULL,
            priority VARCHAR(10) DEFAULT 'normal',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            expires_at TIMESTAMP NULL             -- 过期后在查询时清理
        );
    """

    __tablename__ = "notifications"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    nid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    recipient_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    sender_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    type = Column(String(20), nullable=False)
    title = Column(String(100), nullable=False)
    content = Column(String(500), nullable=False)
    # 关联对象可能已被删除，不加外键
    related_blog_id = Column(String(36), nullable=True)
    related_comment_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(TIMESTAMP(timezone=True), nullable=True)
    priority = Column(String(10), nullable=False, default=NotificationPriority.NORMAL.value)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=True)

    sender = relationship("User", foreign_keys=[sender_id])

    __table_args__ = (
        Index("idx_notification_recipient", "recipient_id", "is_read"),
        Index("idx_notification_recipient_type", "recipient_id", "type"),
    )
