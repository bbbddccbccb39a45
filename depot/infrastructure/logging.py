import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from depot.core.config import Settings, get_settings
from depot.infrastructure.logging_processors import (
    add_service_context,
    format_exception_info,
    sanitize_sensitive_data,
    set_log_severity,
)


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    timestamper = structlog.processors.TimeStamper(fmt="iso")
    
    shared_processors: list[Processor] = [
        # Add contextvars (operation, distribution, author, ...)
        structlog.contextvars.merge_contextvars,
        
        add_service_context,
        
        structlog.processors.add_log_level,
        set_log_severity,
        
        format_exception_info,
        
        timestamper,
        
        # Sanitize sensitive data (should be last before rendering)
        sanitize_sensitive_data,
    ]
    
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.rich_traceback
        )
    
    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    
    # Command output goes to stdout, logs go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level))
    
    for logger_name in ["sqlalchemy.engine", "httpx", "httpcore", "aiosqlite"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(max(logging.WARNING, getattr(logging, settings.log_level)))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
