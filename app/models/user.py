from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP
from sqlalchemy.orm import relationship
import uuid
from enum import Enum
from app.models.base import Base
from app.core.time import now_utc8

class UserRole(str, Enum):
    USER = "user"    # 普通用户
    ADMIN = "admin"  # 管理员

class User(Base):
    """ 用户模型，对应数据库中的 users 表。

        CREATE TABLE IF NOT EXISTS users (
            _id INT AUTO_INCREMENT PRIMARY KEY,        -- 系统主键 ID
            uid VARCHAR(36) UNIQUE,                   -- 用户的业务主键（UUID）
            username VARCHAR(100) NOT NULL,           -- 用户昵称（允许重名）
            email VARCHAR(100) UNIQUE NOT NULL,       -- 邮箱（登录账号）
            password VARCHAR(255) NOT NULL,           -- 密码哈希
            role VARCHAR(20) DEFAULT 'user',          -- 用户角色（user / admin）
            avatar_url VARCHAR(255),                  -- 用户头像 URL
            is_active BOOLEAN DEFAULT TRUE,           -- 是否启用（停用即软删除）

            last_login_at TIMESTAMP NULL,                      -- 最后登录时间
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,    -- 创建时间
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP     -- 更新时间
        );
    """

    __tablename__ = "users"
    # 系统主键：自增
    _id = Column(Integer, primary_key=True, autoincrement=True)  # 系统主键ID，系统用，不对外暴露
    # 业务主键：UUID，唯一且不自增
    uid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), nullable=False)  # 用户昵称，不做唯一约束
    email = Column(String(100), unique=True, nullable=False)  # 登录邮箱，统一小写
    password = Column(String(255), nullable=False)  # 密码哈希
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    avatar_url = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc8, onupdate=now_utc8)

    # 单向引用：该用户的统计信息（关注数和粉丝数）
    userstats = relationship("UserStats", uselist=False, cascade="all, delete-orphan")
