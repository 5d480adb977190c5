from typing import Optional, List
from sqlalchemy.orm import Session
from app.models.user import User
from app.schemas.user import UserCreate, UserOut, UserAllOut, UserUpdate
from app.storage.user.user_interface import IUserRepository
from app.core.db import transaction
from app.core.time import now_utc8


class SQLAlchemyUserRepository(IUserRepository):
    """
    使用 SQLAlchemy 实现的用户仓库
    业务层依赖 IUserRepository 接口，而不是这个具体实现
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_orm(self, uid: str) -> Optional[User]:
        return self.db.query(User).filter(User.uid == uid).first()

    def get_user_by_uid(self, uid: str) -> Optional[UserAllOut]:
        user = self._get_orm(uid)
        return UserAllOut.model_validate(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserAllOut]:
        user = self.db.query(User).filter(User.email == email.lower()).first()
        return UserAllOut.model_validate(user) if user else None

    def get_users_by_uids(self, uids: List[str]) -> List[UserOut]:
        if not uids:
            return []
        rows = self.db.query(User).filter(User.uid.in_(uids)).all()
        by_uid = {u.uid: u for u in rows}
        return [UserOut.model_validate(by_uid[uid]) for uid in uids if uid in by_uid]

    def create_user(self, user_data: UserCreate) -> UserAllOut:
        """
        创建用户
        - 假定 user_data.password 已经是加密后的哈希
        - 邮箱重复由唯一约束兜底，transaction 会转成 AlreadyExistsError
        """
        data = user_data.model_dump(exclude_none=True)
        data["email"] = data["email"].lower()
        data["role"] = user_data.role.value

        user = User(**data)

        with transaction(self.db):
            self.db.add(user)

        # 提交完成之后再 refresh，拿到最新状态（包括默认值等）
        self.db.refresh(user)
        return UserAllOut.model_validate(user)

    def update_user(self, uid: str, user_data: UserUpdate) -> Optional[UserAllOut]:
        user = self._get_orm(uid)
        if not user:
            return None

        update_data = user_data.model_dump(exclude_none=True)

        with transaction(self.db):
            for field, value in update_data.items():
                setattr(user, field, value)
            user.updated_at = now_utc8()

        self.db.refresh(user)
        return UserAllOut.model_validate(user)

    def update_password(self, uid: str, hashed_password: str) -> bool:
        user = self._get_orm(uid)
        if not user:
            return False

        with transaction(self.db):
            user.password = hashed_password
            user.updated_at = now_utc8()
        return True

    def set_active(self, uid: str, is_active: bool) -> Optional[UserAllOut]:
        user = self._get_orm(uid)
        if not user:
            return None

        with transaction(self.db):
            user.is_active = is_active

        self.db.refresh(user)
        return UserAllOut.model_validate(user)

    def set_role(self, uid: str, role: str) -> Optional[UserAllOut]:
        user = self._get_orm(uid)
        if not user:
            return None

        with transaction(self.db):
            user.role = role

        self.db.refresh(user)
        return UserAllOut.model_validate(user)

    def touch_last_login(self, uid: str) -> None:
        user = self._get_orm(uid)
        if not user:
            return
        with transaction(self.db):
            user.last_login_at = now_utc8()
