import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "emotion_backend"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_dir() -> str:
    return os.environ.get(
        "EMOTION_BACKEND_LOG_DIR",
        os.path.join(os.path.expanduser("~"), ".emotion_backend", "logs"),
    )


def setup_logger(name=LOGGER_NAME, level=logging.INFO):
    """
    Configure a logger writing to a rotating file and to stderr.

    Every module of the package logs through ``logging.getLogger(__name__)``,
    so records propagate to the ``emotion_backend`` logger configured here.
    Nothing is ever written to stdout, the host UI may own it.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Idempotent: a second call must not duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    log_dir = _log_dir()
    try:
        os.makedirs(log_dir, exist_ok=True)
        # 5MB per file, 3 backups
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "emotion_backend.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        # Read-only home: keep stderr logging only
        sys.stderr.write(f"emotion_backend: file logging disabled ({e})\n")

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return logger


logger = setup_logger()
