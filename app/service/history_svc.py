from typing import Dict

from app.core.logx import logger
from app.core.exceptions import NotFoundError
from app.schemas.history import BatchHistoryOut
from app.storage.history.history_interface import IHistoryRepository


def list_history(
    history_repo: IHistoryRepository,
    current_uid: str,
    page: int = 0,
    page_size: int = 10,
    to_dict: bool = True,
) -> Dict | BatchHistoryOut:
    """浏览记录，最近访问的在前"""
    result = history_repo.list_by_user(current_uid, page=page, page_size=page_size)
    return result.model_dump() if to_dict else result


def delete_history(history_repo: IHistoryRepository, current_uid: str, blog_id: str) -> bool:
    if not history_repo.delete(current_uid, blog_id):
        raise NotFoundError(f"history for blog {blog_id} not found")
    return True


def clear_history(history_repo: IHistoryRepository, current_uid: str) -> int:
    deleted = history_repo.clear(current_uid)
    logger.info(f"Cleared {deleted} history records for {current_uid}")
    return deleted
