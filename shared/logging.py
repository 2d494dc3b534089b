# shared/logging.py
import structlog
import logging
import sys
from typing import Optional

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

logging.basicConfig(
    format="%(message)s",
    stream=sys.stdout,
    level=logging.INFO,
)

def setup_logging(level: str = "INFO", json_logs: bool = True):
    """Setup logging configuration"""
    log_level = getattr(logging, level.upper())
    logging.getLogger().setLevel(log_level)

    if not json_logs:
        # Human-readable output for local development
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.dev.ConsoleRenderer()
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

def log_tool_call(
    tool_name: str,
    success: bool,
    duration_ms: int,
    error_message: Optional[str] = None
):
    """Log a tool invocation outcome"""
    extra_data = {
        "tool_name": tool_name,
        "success": success,
        "duration_ms": duration_ms
    }

    if error_message:
        extra_data["error_message"] = error_message
        logger.warning("Tool call failed", **extra_data)
    else:
        logger.info("Tool call completed", **extra_data)

def log_task_transition(
    request_id: str,
    task_id: str,
    transition: str,
    was_done: Optional[bool] = None
):
    """Log task lifecycle transitions (done, approved, updated, deleted)"""
    extra_data = {
        "request_id": request_id,
        "task_id": task_id,
        "transition": transition
    }

    if was_done is not None:
        extra_data["was_done"] = was_done

    logger.info("Task transition", **extra_data)

def log_document_persisted(
    document_key: str,
    request_count: int,
    task_count: int
):
    """Log workflow document saves"""
    logger.debug("Workflow document persisted",
                document_key=document_key,
                request_count=request_count,
                task_count=task_count)
