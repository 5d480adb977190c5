from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import AlreadyExistsError, UnexpectedError
from app.core.logx import logger


@contextmanager
def transaction(db: Session):
    """
    事务上下文：
    - 正常退出时 commit
    - 出错时 rollback，并把存储层异常映射为业务异常
        IntegrityError  -> AlreadyExistsError（唯一约束并发冲突）
        SQLAlchemyError -> UnexpectedError
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"integrity error: {e.orig}")
        raise AlreadyExistsError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("database error")
        raise UnexpectedError() from e
    except Exception:
        db.rollback()
        raise
