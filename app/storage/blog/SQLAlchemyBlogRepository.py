from typing import Optional

from sqlalchemy import or_, case
from sqlalchemy.orm import Session, joinedload

from app.models.blog import Blog
from app.schemas.blog import BlogCreate, BlogUpdate, BlogOut, BlogDetailOut, BatchBlogsOut
from app.storage.blog.blog_interface import IBlogRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyBlogRepository(IBlogRepository):
    """
    使用 SQLAlchemy 实现的博客仓库
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_orm(self, bid: str) -> Optional[Blog]:
        return self.db.query(Blog).filter(Blog.bid == bid).first()

    def create_blog(self, user_id: str, data: BlogCreate) -> BlogOut:
        blog = Blog(user_id=user_id, title=data.title, content=data.content)

        with transaction(self.db):
            self.db.add(blog)

        self.db.refresh(blog)
        return BlogOut.model_validate(blog)

    def get_blog(self, bid: str) -> Optional[BlogDetailOut]:
        blog = (
            self.db.query(Blog)
            .options(joinedload(Blog.author))
            .filter(Blog.bid == bid)
            .first()
        )
        return BlogDetailOut.model_validate(blog) if blog else None

    def list_blogs(
        self,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        user_id: Optional[str] = None,
        sort_latest: bool = True,
    ) -> BatchBlogsOut:
        base_q = self.db.query(Blog).options(joinedload(Blog.author))

        if search:
            pattern = f"%{search}%"
            base_q = base_q.filter(or_(Blog.title.like(pattern), Blog.content.like(pattern)))
        if user_id:
            base_q = base_q.filter(Blog.user_id == user_id)

        if sort_latest:
            base_q = base_q.order_by(Blog.created_at.desc(), Blog._id.desc())
        else:
            base_q = base_q.order_by(Blog.view_count.desc(), Blog._id.desc())

        total = base_q.count()
        rows = base_q.offset(page * page_size).limit(page_size).all()

        items = [BlogDetailOut.model_validate(b) for b in rows]
        return BatchBlogsOut(total=total, count=len(items), items=items)

    def update_blog(self, bid: str, data: BlogUpdate) -> Optional[BlogOut]:
        blog = self._get_orm(bid)
        if not blog:
            return None

        update_data = data.model_dump(exclude_none=True)

        with transaction(self.db):
            for field, value in update_data.items():
                setattr(blog, field, value)
            blog.updated_at = now_utc8()

        self.db.refresh(blog)
        return BlogOut.model_validate(blog)

    def delete_blog(self, bid: str) -> bool:
        blog = self._get_orm(bid)
        if not blog:
            return False

        with transaction(self.db):
            self.db.delete(blog)
        return True

    def increment_view(self, bid: str) -> Optional[BlogOut]:
        blog = self._get_orm(bid)
        if not blog:
            return None

        with transaction(self.db):
            blog.view_count = Blog.view_count + 1

        self.db.refresh(blog)
        return BlogOut.model_validate(blog)

    def update_favorite_count(self, bid: str, step: int = 1) -> Optional[BlogOut]:
        blog = self._get_orm(bid)
        if not blog:
            return None

        with transaction(self.db):
            # 在数据库端加减，最小为 0
            new_count = Blog.favorite_count + step
            blog.favorite_count = case((new_count < 0, 0), else_=new_count)

        self.db.refresh(blog)
        return BlogOut.model_validate(blog)
