import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"


class Logx:
    """
    Thin wrapper around the ``snsfeed`` logger.

    Every module does ``from snsfeed.core.logx import logger`` and may flip
    verbose output with ``logger.is_debug(True)``.
    """

    def __init__(self, name: str = "snsfeed"):
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(_FORMAT))
            self._logger.addHandler(handler)
        self._logger.setLevel(logging.INFO)

    @property
    def raw(self) -> logging.Logger:
        return self._logger

    def is_debug(self, flag: bool = True) -> None:
        self._logger.setLevel(logging.DEBUG if flag else logging.INFO)

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        self._logger.exception(msg, *args, **kwargs)


logger = Logx()
