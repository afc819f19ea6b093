from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/gateway-provisioner.log"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


def log_success(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(SUCCESS, msg, *args)


class StatusFormatter(logging.Formatter):
    """Console status lines: ``[INFO] ...``, ``[SUCCESS] ...``, ``[ERROR] ...``."""

    def __init__(self) -> None:
        super().__init__(fmt="[%(levelname)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        # Tracebacks stay in the file log.
        if record.exc_info:
            record = logging.makeLogRecord({**record.__dict__, "exc_info": None, "exc_text": None})
        return super().format(record)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every decision and command is recorded to the file log.

    Notes:
    - Writing to /var/log needs root. We still *attempt* it first; if it fails,
      we fall back to a local file in the working directory.
    - The console only shows labelled status lines.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_gateway_configured", False):
        return getattr(logger, "_gateway_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        fallback = str(Path.cwd() / "gateway-provisioner.log")
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(StatusFormatter())
        console.setLevel(level)
        # CMD lines go to the file log only.
        console.addFilter(lambda r: not r.name.endswith(".lib.command"))
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_gateway_configured", True)
    setattr(logger, "_gateway_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
