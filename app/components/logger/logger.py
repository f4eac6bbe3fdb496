import logging
import sys


DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Logger:
    """Hands out named loggers that all write to stderr with one format and level."""

    ROOT_NAME = "llm_review"

    def __init__(
        self, log_format: str | None = None, log_level: str | int = "WARNING"
    ) -> None:
        self.log_format = log_format or DEFAULT_LOG_FORMAT
        self.log_level = (
            logging.getLevelName(log_level.upper())
            if isinstance(log_level, str)
            else log_level
        )
        if not isinstance(self.log_level, int):
            raise ValueError(f"Unknown log level: {log_level}")

        self._root = logging.getLogger(self.ROOT_NAME)
        self._root.setLevel(self.log_level)
        self._root.propagate = False
        if not self._root.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(self.log_format))
            self._root.addHandler(handler)

    def set_level(self, log_level: int) -> None:
        self.log_level = log_level
        self._root.setLevel(log_level)

    def get_logger(self, name: str) -> logging.Logger:
        return self._root.getChild(name)
