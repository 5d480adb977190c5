from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Depends

from app.core.config import settings
from app.models.base import Base
from app.storage.user.SQLAlchemyUserRepository import SQLAlchemyUserRepository
from app.storage.user_stats.SQLAlchemyUserStatsRepository import SQLAlchemyUserStatsRepository
from app.storage.follow.SQLAlchemyFollowRepository import SQLAlchemyFollowRepository
from app.storage.blacklist.SQLAlchemyBlacklistRepository import SQLAlchemyBlacklistRepository
from app.storage.blog.SQLAlchemyBlogRepository import SQLAlchemyBlogRepository
from app.storage.favorite.SQLAlchemyFavoriteRepository import SQLAlchemyFavoriteRepository
from app.storage.history.SQLAlchemyHistoryRepository import SQLAlchemyHistoryRepository
from app.storage.comment.SQLAlchemyCommentRepository import SQLAlchemyCommentRepository
from app.storage.comment_like.SQLAlchemyCommentLikeRepository import SQLAlchemyCommentLikeRepository
from app.storage.notification.SQLAlchemyNotificationRepository import SQLAlchemyNotificationRepository


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # 内存库需要所有会话共用同一个连接
        return create_engine(
            url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=settings.DB_ECHO, pool_pre_ping=True)


# SQLAlchemy 引擎
engine = _build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """导入全部模型并建表（已存在的表会跳过）"""
    from app.models import (  # noqa: F401
        user, user_stats, follow, blacklist, blog, favorite, history,
        comment, comment_like, notification,
    )
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """
    后台任务不能复用请求内的 Session，需要自己开会话
    """
    return SessionLocal


# 未来可以根据配置切换不同的实现
def get_user_repo(db: Session = Depends(get_db)) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db)
def get_usersta_repo(db: Session = Depends(get_db)) -> SQLAlchemyUserStatsRepository:
    return SQLAlchemyUserStatsRepository(db)
def get_follow_repo(db: Session = Depends(get_db)) -> SQLAlchemyFollowRepository:
    return SQLAlchemyFollowRepository(db)
def get_blacklist_repo(db: Session = Depends(get_db)) -> SQLAlchemyBlacklistRepository:
    return SQLAlchemyBlacklistRepository(db)
def get_blog_repo(db: Session = Depends(get_db)) -> SQLAlchemyBlogRepository:
    return SQLAlchemyBlogRepository(db)
def get_favorite_repo(db: Session = Depends(get_db)) -> SQLAlchemyFavoriteRepository:
    return SQLAlchemyFavoriteRepository(db)
def get_history_repo(db: Session = Depends(get_db)) -> SQLAlchemyHistoryRepository:
    return SQLAlchemyHistoryRepository(db)
def get_comment_repo(db: Session = Depends(get_db)) -> SQLAlchemyCommentRepository:
    return SQLAlchemyCommentRepository(db)
def get_comment_like_repo(db: Session = Depends(get_db)) -> SQLAlchemyCommentLikeRepository:
    return SQLAlchemyCommentLikeRepository(db)
def get_notification_repo(db: Session = Depends(get_db)) -> SQLAlchemyNotificationRepository:
    return SQLAlchemyNotificationRepository(db)
