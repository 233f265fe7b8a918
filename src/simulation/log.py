from __future__ import annotations

import logging
from typing import Optional, Protocol


class LogSink(Protocol):
    """Leveled message sink handed to the dispatcher."""

    def information(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class NullLogSink:
    """Discards everything; the default for library use and tests."""

    def information(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class LoggerSink:
    """Forwards sink messages to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("liftlogic")

    def information(self, message: str) -> None:
        self.logger.info(message)

    def error(self, message: str) -> None:
        self.logger.error(message)


def configure_logging(log_file: Optional[str] = None, quiet: bool = False) -> logging.Logger:
    """Console plus optional file handler, mirroring the runtime log of the CLI."""

    logger = logging.getLogger("liftlogic")
    logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = False
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    console = logging.StreamHandler()
    console.setLevel(logging.ERROR if quiet else logging.INFO)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger
