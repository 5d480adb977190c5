from typing import Optional, List

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.models.blacklist import Blacklist
from app.models.user import User
from app.schemas.blacklist import BlacklistOut, BlockedUserOut, BatchBlacklistOut
from app.schemas.user import UserOut
from app.storage.blacklist.blacklist_interface import IBlacklistRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyBlacklistRepository(IBlacklistRepository):
    """
    使用 SQLAlchemy 实现的拉黑关系仓库
    """

    def __init__(self, db: Session):
        self.db = db

    def _pair_query(self, blocker_id: str, blocked_id: str):
        return self.db.query(Blacklist).filter(
            Blacklist.blocker_id == blocker_id,
            Blacklist.blocked_id == blocked_id,
        )

    def create(self, blocker_id: str, blocked_id: str, reason: Optional[str] = None) -> BlacklistOut:
        record = Blacklist(
            blocker_id=blocker_id,
            blocked_id=blocked_id,
            reason=reason,
            created_at=now_utc8(),
        )
        with transaction(self.db):
            self.db.add(record)

        self.db.refresh(record)
        return BlacklistOut.model_validate(record)

    def delete(self, blocker_id: str, blocked_id: str) -> bool:
        record = self._pair_query(blocker_id, blocked_id).first()
        if not record:
            return False

        with transaction(self.db):
            self.db.delete(record)
        return True

    def exists(self, blocker_id: str, blocked_id: str) -> bool:
        return self._pair_query(blocker_id, blocked_id).first() is not None

    def exists_either(self, user_a: str, user_b: str) -> bool:
        return (
            self.db.query(Blacklist)
            .filter(
                or_(
                    and_(Blacklist.blocker_id == user_a, Blacklist.blocked_id == user_b),
                    and_(Blacklist.blocker_id == user_b, Blacklist.blocked_id == user_a),
                )
            )
            .first()
            is not None
        )

    def list_blocked(self, blocker_id: str, page: int, page_size: int) -> BatchBlacklistOut:
        base_q = (
            self.db.query(Blacklist, User)
            .join(User, User.uid == Blacklist.blocked_id)
            .filter(Blacklist.blocker_id == blocker_id)
            .order_by(Blacklist.created_at.desc(), Blacklist._id.desc())
        )

        total = base_q.count()
        rows = base_q.offset(page * page_size).limit(page_size).all()

        items: List[BlockedUserOut] = [
            BlockedUserOut(
                user=UserOut.model_validate(user_orm),
                reason=record.reason,
                created_at=record.created_at,
            )
            for record, user_orm in rows
        ]
        return BatchBlacklistOut(total=total, count=len(items), items=items)
