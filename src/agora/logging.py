"""
Logging and observability for Agora.

Provides structured logging with tracing support for moderation decisions
and identity reveal transitions.
"""

from __future__ import annotations

import logging
import time
from uuid import uuid4

import structlog

from agora.config import get_settings


def configure_logging() -> None:
    """Configure structlog from settings: console output in development, JSON elsewhere."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.is_development
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)


class TraceContext:
    """
    Trace one conversation-scoped reveal operation.

    Collects the phase transitions applied inside the block and emits a
    single `trace_end` summary with them. Only ids and phase names are
    logged, never real names or message bodies.
    """

    def __init__(
        self,
        operation: str,
        conversation_id: str | None = None,
        user_id: str | None = None,
    ):
        self.operation = operation
        self.trace_id = uuid4().hex[:8]
        self.conversation_id = conversation_id
        self.user_id = user_id
        self.transitions: list[str] = []
        self.logger = get_logger("trace").bind(
            trace_id=self.trace_id,
            operation=operation,
            conversation_id=conversation_id,
        )
        self._started = time.perf_counter()

    def __enter__(self) -> "TraceContext":
        self.logger.debug("trace_start", user_id=self.user_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.logger.info(
            "trace_end",
            duration_ms=round((time.perf_counter() - self._started) * 1000, 2),
            transitions=self.transitions,
            error=exc_type.__name__ if exc_type else None,
        )

    def log_transition(self, from_phase: str, to_phase: str) -> None:
        """Record a reveal phase change."""
        self.transitions.append(f"{from_phase}->{to_phase}")
        self.logger.debug("reveal_transition", from_phase=from_phase, to_phase=to_phase)


# Configure logging on module import
configure_logging()
