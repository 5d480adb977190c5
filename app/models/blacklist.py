from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from app.models.base import Base
from app.core.time import now_utc8

class Blacklist(Base):
    """ 拉黑关系表：有向边 blocker -> blocked，与关注关系互相独立

        CREATE TABLE IF NOT EXISTS blacklists (
            _id INT AUTO_INCREMENT PRIMARY KEY,
            blocker_id VARCHAR(36) NOT NULL,   -- 拉黑者 (FK -> users.uid)
            blocked_id VARCHAR(36) NOT NULL,   -- 被拉黑者 (FK -> users.uid)
            reason VARCHAR(200),               -- 拉黑原因
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_blacklist_pair UNIQUE (blocker_id, blocked_id)
        );
    """

    __tablename__ = "blacklists"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    blocker_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    blocked_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    reason = Column(String(200), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    blocked_user = relationship("User", foreign_keys=[blocked_id])

    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="uq_blacklist_pair"),
        Index("idx_blacklist_blocked", "blocked_id"),
    )
