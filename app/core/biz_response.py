from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.config import settings


class BizResponse(JSONResponse):
    """
    统一响应结构：
        {"success": bool, "message": str, "data": ..., "error": "ErrorKind"}
    - success 由 status_code < 400 决定
    - 5xx 在非 DEBUG 环境下隐藏具体错误信息
    """

    def __init__(
        self,
        data: Any = None,
        msg: str = "ok",
        status_code: int = 200,
        error: Optional[str] = None,
        **kwargs,
    ):
        success = status_code < 400
        if status_code >= 500 and not settings.DEBUG:
            msg = "Internal server error"

        body = {
            "success": success,
            "message": msg,
            "data": jsonable_encoder(data),
        }
        if not success:
            body["error"] = error or _default_error(status_code)

        super().__init__(content=body, status_code=status_code, **kwargs)


def _default_error(status_code: int) -> str:
    return {
        400: "ValidationError",
        401: "AuthError",
        403: "PermissionDeniedError",
        404: "NotFoundError",
        409: "AlreadyExistsError",
    }.get(status_code, "UnexpectedError")
