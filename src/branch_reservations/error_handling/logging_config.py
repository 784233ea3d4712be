"""
Centralized logging configuration for the reservation settings client.

This module configures loguru for structured logging with different
levels and formats for development vs production.
"""
import sys
import time
import functools
from pathlib import Path
from typing import Optional
from loguru import logger


def configure_logging(
    log_level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    rotation: str = "100 MB",
    retention: str = "30 days",
    format_type: str = "detailed"
) -> None:
    """
    Configure loguru logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
        log_dir: Directory for log files
        rotation: When to rotate log files (e.g., "100 MB", "1 day")
        retention: How long to keep old log files
        format_type: Format style ("simple", "detailed")
    """
    # Remove default logger
    logger.remove()

    if format_type == "simple":
        format_string = "<level>{level: <8}</level> | <level>{message}</level>"
    else:  # detailed
        format_string = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

    logger.add(
        sys.stderr,
        format=format_string,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=False
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "reservations_{time:YYYY-MM-DD}.log",
            format=format_string,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

        logger.add(
            log_path / "errors_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="ERROR",
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

        # Audit trail of bulk changes
        logger.add(
            log_path / "batches_{time:YYYY-MM-DD}.log",
            format=format_string,
            level="INFO",
            rotation="1 day",
            retention="1 year",
            compression="zip",
            filter=lambda record: record["extra"].get("category") == "BATCH"
        )

    logger.info(
        f"Logging configured: level={log_level}, "
        f"file_logging={log_to_file}, "
        f"format={format_type}"
    )


def log_api_call(
    method: str,
    path: str,
    success: bool,
    duration: float,
    status_code: Optional[int] = None
) -> None:
    """
    Log a reservations API call.

    Args:
        method: HTTP method
        path: Request path relative to the API root
        success: Whether the call succeeded
        duration: Duration in seconds
        status_code: Response status, None when no response arrived
    """
    level = "DEBUG" if success else "WARNING"

    logger.bind(category="API").log(
        level,
        f"API {method} {path} | "
        f"success={success} | "
        f"status={status_code} | "
        f"duration={duration:.3f}s"
    )


def log_batch_event(
    event_type: str,
    total: int,
    failed_ids: Optional[list] = None,
    details: Optional[dict] = None
) -> None:
    """
    Log a bulk update event for the audit trail.

    Args:
        event_type: Type of event (e.g., "STARTED", "COMPLETED", "PARTIAL_FAILURE")
        total: Number of branches in the batch
        failed_ids: Identifiers of branches whose update failed
        details: Additional event details
    """
    failed_ids = failed_ids or []
    details = details or {}
    level = "WARNING" if failed_ids else "INFO"

    logger.bind(category="BATCH").log(
        level,
        f"BATCH {event_type} | "
        f"total={total} | "
        f"failed={len(failed_ids)} | "
        f"failed_ids={failed_ids} | "
        f"details={details}"
    )


class LogContext:
    """
    Context manager for adding context to all logs within a block.

    Example:
        with LogContext(operation="disable_all", batch_size=12):
            logger.info("Dispatching updates")
    """

    def __init__(self, **context):
        self.context = context
        self.token = None

    def __enter__(self):
        self.token = logger.contextualize(**self.context)
        self.token.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token:
            self.token.__exit__(exc_type, exc_val, exc_tb)


def log_performance(operation_name: Optional[str] = None):
    """
    Decorator to log coroutine performance.

    Args:
        operation_name: Name of operation (defaults to function name)

    Example:
        @log_performance("fetch_hierarchy")
        async def fetch_hierarchy(client):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            name = operation_name or func.__name__
            start_time = time.perf_counter()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                logger.bind(category="PERFORMANCE").warning(
                    f"Performance | {name} | "
                    f"duration={duration:.3f}s | "
                    f"success=False | "
                    f"error={type(e).__name__}"
                )
                raise

            duration = time.perf_counter() - start_time
            logger.bind(category="PERFORMANCE").debug(
                f"Performance | {name} | "
                f"duration={duration:.3f}s | "
                f"success=True"
            )
            return result

        return wrapper
    return decorator


def init_logging(environment: str = "development", log_level: Optional[str] = None) -> None:
    """
    Initialize logging with environment-specific settings.

    Args:
        environment: Environment name ("development", "production", "test")
        log_level: Overrides the environment's default level
    """
    if environment == "production":
        configure_logging(
            log_level=log_level or "INFO",
            log_to_file=True,
            format_type="detailed",
            rotation="100 MB",
            retention="90 days"
        )
    elif environment == "test":
        configure_logging(
            log_level=log_level or "WARNING",
            log_to_file=False,
            format_type="simple"
        )
    else:  # development
        configure_logging(
            log_level=log_level or "DEBUG",
            log_to_file=False,
            format_type="detailed"
        )

    logger.info(f"Logging initialized for {environment} environment")
