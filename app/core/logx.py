import logging
import sys

from app.core.config import settings

_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


class LogX:
    """
    项目统一日志入口：
    - 包一层标准库 logging，只挂一个 stream handler
    - is_debug(True) 让当前进程输出 debug 日志，方便调试某个模块
    """

    def __init__(self, name: str = "social", level: str = "INFO"):
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(_FORMAT))
            self._logger.addHandler(handler)
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False

    def is_debug(self, flag: bool = True) -> None:
        if flag:
            self._logger.setLevel(logging.DEBUG)
        else:
            self._logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        """记录错误并附带堆栈，只能在 except 块中调用"""
        self._logger.exception(msg, *args, **kwargs)


logger = LogX(level=settings.LOG_LEVEL)
