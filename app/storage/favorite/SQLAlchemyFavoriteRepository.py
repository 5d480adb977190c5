from typing import Optional

from sqlalchemy.orm import Session

from app.models.favorite import Favorite
from app.schemas.favorite import FavoriteOut, BatchFavoritesOut
from app.storage.favorite.favorite_interface import IFavoriteRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyFavoriteRepository(IFavoriteRepository):
    def __init__(self, db: Session):
        self.db = db

    def _pair_query(self, user_id: str, blog_id: str):
        return self.db.query(Favorite).filter(
            Favorite.user_id == user_id,
            Favorite.blog_id == blog_id,
        )

    def create(
        self,
        user_id: str,
        blog_id: str,
        blog_title: str,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> FavoriteOut:
        favorite = Favorite(
            user_id=user_id,
            blog_id=blog_id,
            blog_title=blog_title,
            category=category or "default",
            note=note,
            created_at=now_utc8(),
        )
        with transaction(self.db):
            self.db.add(favorite)

        self.db.refresh(favorite)
        return FavoriteOut.model_validate(favorite)

    def delete(self, user_id: str, blog_id: str) -> bool:
        favorite = self._pair_query(user_id, blog_id).first()
        if not favorite:
            return False

        with transaction(self.db):
            self.db.delete(favorite)
        return True

    def exists(self, user_id: str, blog_id: str) -> bool:
        return self._pair_query(user_id, blog_id).first() is not None

    def list_by_user(
        self, user_id: str, page: int, page_size: int, category: Optional[str] = None
    ) -> BatchFavoritesOut:
        base_q = self.db.query(Favorite).filter(Favorite.user_id == user_id)
        if category:
            base_q = base_q.filter(Favorite.category == category)
        base_q = base_q.order_by(Favorite.created_at.desc(), Favorite._id.desc())

        total = base_q.count()
        rows = base_q.offset(page * page_size).limit(page_size).all()

        items = [FavoriteOut.model_validate(f) for f in rows]
        return BatchFavoritesOut(total=total, count=len(items), items=items)

    def delete_by_blog(self, blog_id: str) -> int:
        q = self.db.query(Favorite).filter(Favorite.blog_id == blog_id)
        count = q.count()
        if count == 0:
            return 0

        with transaction(self.db):
            q.delete(synchronize_session=False)
        return count
