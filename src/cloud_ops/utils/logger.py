# utils/logger.py
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

from cloud_ops.core.constants import LOG_BACKUP_COUNT, LOG_DIR, LOG_ROTATION_MAX_BYTES


def resolve_level(level: Union[str, int]) -> int:
    """Map a level name or number ('debug', '10', 10) to a logging level, INFO if unknown"""
    if isinstance(level, int):
        return level
    level = str(level).strip()
    if level.isdigit():
        return int(level)
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: Union[str, int] = "INFO",
    enable_rotation: bool = True,
    max_bytes: int = LOG_ROTATION_MAX_BYTES,
    backup_count: int = LOG_BACKUP_COUNT,
) -> logging.Logger:
    """Setup logger with console output and an optional rotating log file"""
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    # Prevent duplicate handlers
    if not logger.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(logging.INFO)  # Only INFO and above to console
        logger.addHandler(stream_handler)

        if log_file:
            logs_dir = Path(LOG_DIR)
            log_path = logs_dir / log_file

            try:
                logs_dir.mkdir(exist_ok=True)
                if enable_rotation:
                    file_handler = logging.handlers.RotatingFileHandler(
                        log_path,
                        maxBytes=max_bytes,
                        backupCount=backup_count,
                        encoding="utf-8",
                    )
                else:
                    file_handler = logging.FileHandler(log_path, encoding="utf-8")

                file_handler.setFormatter(formatter)
                file_handler.setLevel(logging.DEBUG)  # All levels to file
                logger.addHandler(file_handler)

            except (OSError, PermissionError) as e:
                logger.warning(
                    f"Failed to create log file {log_path}: {e}. Logging to console only."
                )

        # Prevent propagation to root logger to avoid duplicate messages
        logger.propagate = False

    return logger
