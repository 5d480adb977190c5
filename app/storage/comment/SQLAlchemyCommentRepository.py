from typing import Optional, List

from sqlalchemy.orm import Session, joinedload

from app.models.comment import Comment
from app.schemas.comment import CommentRecord
from app.storage.comment.comment_interface import ICommentRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyCommentRepository(ICommentRepository):
    """
    使用 SQLAlchemy 实现的评论仓库
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Comment).options(joinedload(Comment.author))

    def create_comment(
        self,
        blog_id: str,
        author_id: str,
        content: str,
        parent_id: Optional[str] = None,
        reply_to_id: Optional[str] = None,
        from_user_name: Optional[str] = None,
        to_user_name: Optional[str] = None,
    ) -> CommentRecord:
        comment = Comment(
            blog_id=blog_id,
            author_id=author_id,
            content=content,
            parent_id=parent_id,
            reply_to_id=reply_to_id,
            from_user_name=from_user_name,
            to_user_name=to_user_name,
            like_count=0,
            created_at=now_utc8(),
        )

        with transaction(self.db):
            self.db.add(comment)

        self.db.refresh(comment)
        return CommentRecord.model_validate(comment)

    def get_comment(self, cid: str) -> Optional[CommentRecord]:
        comment = self._query().filter(Comment.cid == cid).first()
        return CommentRecord.model_validate(comment) if comment else None

    def list_top_level(self, blog_id: str) -> List[CommentRecord]:
        rows = (
            self._query()
            .filter(Comment.blog_id == blog_id, Comment.parent_id.is_(None))
            .order_by(Comment.created_at.desc(), Comment._id.desc())
            .all()
        )
        return [CommentRecord.model_validate(c) for c in rows]

    def list_replies(self, parent_ids: List[str]) -> List[CommentRecord]:
        if not parent_ids:
            return []
        rows = (
            self._query()
            .filter(Comment.parent_id.in_(parent_ids))
            .order_by(Comment.created_at.asc(), Comment._id.asc())
            .all()
        )
        return [CommentRecord.model_validate(c) for c in rows]

    def list_thread_ids(self, cid: str) -> List[str]:
        reply_ids = [
            row.cid
            for row in self.db.query(Comment.cid).filter(Comment.parent_id == cid).all()
        ]
        return [cid] + reply_ids

    def delete_thread(self, cid: str) -> int:
        """
        先删回复再删本身（parent_id 有外键指向 comments.cid）
        """
        replies_q = self.db.query(Comment).filter(Comment.parent_id == cid)
        self_q = self.db.query(Comment).filter(Comment.cid == cid)

        with transaction(self.db):
            deleted = replies_q.delete(synchronize_session=False)
            deleted += self_q.delete(synchronize_session=False)

        return deleted

    def list_ids_by_blog(self, blog_id: str) -> List[str]:
        return [row.cid for row in self.db.query(Comment.cid).filter(Comment.blog_id == blog_id).all()]

    def delete_by_blog(self, blog_id: str) -> int:
        replies_q = self.db.query(Comment).filter(
            Comment.blog_id == blog_id, Comment.parent_id.isnot(None)
        )
        top_q = self.db.query(Comment).filter(
            Comment.blog_id == blog_id, Comment.parent_id.is_(None)
        )

        with transaction(self.db):
            deleted = replies_q.delete(synchronize_session=False)
            deleted += top_q.delete(synchronize_session=False)

        return deleted

    def set_like_count(self, cid: str, like_count: int) -> None:
        with transaction(self.db):
            self.db.query(Comment).filter(Comment.cid == cid).update(
                {Comment.like_count: like_count}, synchronize_session=False
            )
