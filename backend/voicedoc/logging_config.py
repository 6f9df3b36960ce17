import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from voicedoc.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s"


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """
    Configures logging for the proxy.
    Outputs to stdout and to a rotating file under ``LOG_DIR``.
    Safe to call more than once: existing handlers are not duplicated.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_dir = log_dir or settings.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "voicedoc.log")

    log_formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)

    has_file_handler = any(isinstance(h, RotatingFileHandler) for h in root_logger.handlers)
    if not has_file_handler:
        file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024 * 5, backupCount=2)  # 5MB per file, 2 backups
        file_handler.setFormatter(log_formatter)
        root_logger.addHandler(file_handler)

    has_console_handler = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
        for h in root_logger.handlers
    )
    if not has_console_handler:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(log_formatter)
        root_logger.addHandler(console_handler)

    logging.getLogger("voicedoc").setLevel(level_name)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # httpx logs every request line at INFO; the proxy logs its own upstream calls.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.info("Logging configured successfully (console and file: %s).", log_file)
