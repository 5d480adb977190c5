from typing import List, Set

from sqlalchemy.orm import Session

from app.models.comment_like import CommentLike
from app.storage.comment_like.comment_like_interface import ICommentLikeRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyCommentLikeRepository(ICommentLikeRepository):
    def __init__(self, db: Session):
        self.db = db

    def _pair_query(self, comment_id: str, user_id: str):
        return self.db.query(CommentLike).filter(
            CommentLike.comment_id == comment_id,
            CommentLike.user_id == user_id,
        )

    def exists(self, comment_id: str, user_id: str) -> bool:
        return self._pair_query(comment_id, user_id).first() is not None

    def add(self, comment_id: str, user_id: str) -> None:
        with transaction(self.db):
            self.db.add(CommentLike(comment_id=comment_id, user_id=user_id, created_at=now_utc8()))

    def remove(self, comment_id: str, user_id: str) -> bool:
        like = self._pair_query(comment_id, user_id).first()
        if not like:
            return False

        with transaction(self.db):
            self.db.delete(like)
        return True

    def count(self, comment_id: str) -> int:
        return self.db.query(CommentLike).filter(CommentLike.comment_id == comment_id).count()

    def liked_comment_ids(self, user_id: str, comment_ids: List[str]) -> Set[str]:
        if not comment_ids:
            return set()
        rows = (
            self.db.query(CommentLike.comment_id)
            .filter(CommentLike.user_id == user_id, CommentLike.comment_id.in_(comment_ids))
            .all()
        )
        return {row.comment_id for row in rows}

    def delete_by_comments(self, comment_ids: List[str]) -> int:
        if not comment_ids:
            return 0
        with transaction(self.db):
            deleted = (
                self.db.query(CommentLike)
                .filter(CommentLike.comment_id.in_(comment_ids))
                .delete(synchronize_session=False)
            )
        return deleted
