"""
Logging configuration for the post settings service.
"""

import logging
import logging.handlers
from datetime import datetime
from typing import Optional, Dict
import json
from pathlib import Path

# Quieter defaults for chatty third-party loggers
LOGGING_LEVELS: Dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "apscheduler": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        log_format: Log message format
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup log files to keep
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for logger_name, level in LOGGING_LEVELS.items():
        logging.getLogger(logger_name).setLevel(level)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {log_level}")
    if log_file:
        logger.info(f"Log file: {log_file}")


def log_request(request, response=None, error=None, duration_ms=None):
    """
    Log HTTP request details.

    Args:
        request: FastAPI request object
        response: FastAPI response object (optional)
        error: Exception object (optional)
        duration_ms: Time spent handling the request (optional)
    """
    logger = logging.getLogger("http")

    log_data = {
        "timestamp": datetime.now().isoformat(),
        "method": request.method,
        "url": str(request.url),
        "client_ip": request.client.host if request.client else "unknown",
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    if response is not None:
        log_data.update({
            "status_code": response.status_code,
            "response_time": duration_ms
        })

    if error:
        log_data.update({
            "error": str(error),
            "error_type": type(error).__name__
        })

    if error:
        logger.error(f"Request failed: {json.dumps(log_data)}")
    else:
        logger.info(f"Request completed: {json.dumps(log_data)}")


def log_slug_change(post_ref, outcome, candidate=None, server_slug=None, current_slug=None, error=None):
    """
    Log the outcome of a slug reconciliation.

    Args:
        post_ref: Identifier of the post being edited
        outcome: skipped, aborted, committed, persisted or failed
        candidate: Slug text the user asked for
        server_slug: Canonical slug returned by the slug endpoint
        current_slug: Slug committed before the change
        error: Exception object (optional)
    """
    logger = logging.getLogger("slug_reconciliation")

    log_data = {
        "timestamp": datetime.now().isoformat(),
        "post": post_ref,
        "outcome": outcome,
        "candidate": candidate,
        "server_slug": server_slug,
        "current_slug": current_slug,
    }

    if error:
        log_data.update({
            "error": str(error),
            "error_type": type(error).__name__
        })
        logger.error(f"Slug change failed: {json.dumps(log_data)}")
    elif outcome in ("committed", "persisted"):
        logger.info(f"Slug changed: {json.dumps(log_data)}")
    else:
        logger.debug(f"Slug left unchanged: {json.dumps(log_data)}")


def log_post_save(post_ref, success, changed_fields=None, error=None):
    """
    Log a save attempt made by the settings menu.

    Args:
        post_ref: Identifier of the post being saved
        success: Whether the server accepted the save
        changed_fields: Field names that were dirty when the save started
        error: Exception object (optional)
    """
    logger = logging.getLogger("post_save")

    log_data = {
        "timestamp": datetime.now().isoformat(),
        "post": post_ref,
        "success": success,
        "changed_fields": sorted(changed_fields or []),
    }

    if error:
        log_data.update({
            "error": str(error),
            "error_type": type(error).__name__
        })

    if success:
        logger.info(f"Post save successful: {json.dumps(log_data)}")
    else:
        logger.error(f"Post save failed: {json.dumps(log_data)}")
