import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_HANDLER_NAME = "partyhub"


class _StderrHandler(logging.StreamHandler):
    """出力先を明示しない限り、書き込みのたびに現在の sys.stderr を参照する"""

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        self._explicit_stream = stream

    @property
    def stream(self):
        return self._explicit_stream if self._explicit_stream is not None else sys.stderr

    @stream.setter
    def stream(self, value):
        self._explicit_stream = value


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    """partyhub ロガーに stderr ハンドラを一度だけ取り付ける"""
    logger = logging.getLogger("partyhub")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = _StderrHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
