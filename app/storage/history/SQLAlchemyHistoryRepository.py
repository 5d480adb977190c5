from sqlalchemy.orm import Session

from app.models.history import History
from app.schemas.history import HistoryOut, BatchHistoryOut
from app.storage.history.history_interface import IHistoryRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyHistoryRepository(IHistoryRepository):
    def __init__(self, db: Session):
        self.db = db

    def upsert_visit(self, user_id: str, blog_id: str, blog_title: str, source: str = "direct") -> HistoryOut:
        record = (
            self.db.query(History)
            .filter(History.user_id == user_id, History.blog_id == blog_id)
            .first()
        )

        with transaction(self.db):
            if record is None:
                record = History(user_id=user_id, blog_id=blog_id)
                self.db.add(record)
            record.blog_title = blog_title
            record.source = source
            record.visited_at = now_utc8()

        self.db.refresh(record)
        return HistoryOut.model_validate(record)

    def list_by_user(self, user_id: str, page: int, page_size: int) -> BatchHistoryOut:
        base_q = (
            self.db.query(History)
            .filter(History.user_id == user_id)
            .order_by(History.visited_at.desc(), History._id.desc())
        )

        total = base_q.count()
        rows = base_q.offset(page * page_size).limit(page_size).all()

        items = [HistoryOut.model_validate(h) for h in rows]
        return BatchHistoryOut(total=total, count=len(items), items=items)

    def delete(self, user_id: str, blog_id: str) -> bool:
        q = self.db.query(History).filter(History.user_id == user_id, History.blog_id == blog_id)
        if q.first() is None:
            return False

        with transaction(self.db):
            q.delete(synchronize_session=False)
        return True

    def clear(self, user_id: str) -> int:
        q = self.db.query(History).filter(History.user_id == user_id)
        count = q.count()
        if count == 0:
            return 0

        with transaction(self.db):
            q.delete(synchronize_session=False)
        return count

    def delete_by_blog(self, blog_id: str) -> int:
        q = self.db.query(History).filter(History.blog_id == blog_id)
        count = q.count()
        if count == 0:
            return 0

        with transaction(self.db):
            q.delete(synchronize_session=False)
        return count
