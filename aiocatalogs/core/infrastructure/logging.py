"""Logging configuration with structlog integration.

Two logging channels are used:
1. loguru: diagnostic logs for debugging
2. structlog: structured logs for key business events
"""

import sys
from typing import Any

import structlog
from loguru import logger

from aiocatalogs.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """Configure the structlog processor chain."""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """Configure loguru handlers."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/aiocatalogs_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# Business event logger
# ============================================================================


class BusinessEvents:
    """Helpers that keep business event names and fields consistent.

    Usage:
        from aiocatalogs.core.infrastructure.logging import BusinessEvents

        BusinessEvents.source_removed(user_id="u-1", source_id="org.example")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def source_added(
        cls,
        user_id: str,
        source_id: str,
        catalog_count: int,
        replaced: bool,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "source_added",
            event_type="registry",
            user_id=user_id,
            source_id=source_id,
            catalog_count=catalog_count,
            replaced=replaced,
            **extra,
        )

    @classmethod
    def source_removed(cls, user_id: str, source_id: str, **extra: Any) -> None:
        cls._log.info(
            "source_removed",
            event_type="registry",
            user_id=user_id,
            source_id=source_id,
            **extra,
        )

    @classmethod
    def sources_reordered(
        cls,
        user_id: str,
        source_id: str,
        direction: str,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "sources_reordered",
            event_type="registry",
            user_id=user_id,
            source_id=source_id,
            direction=direction,
            **extra,
        )

    @classmethod
    def source_updated(
        cls,
        user_id: str,
        source_id: str,
        field: str,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "source_updated",
            event_type="registry",
            user_id=user_id,
            source_id=source_id,
            field=field,
            **extra,
        )

    @classmethod
    def manifest_composed(
        cls,
        user_id: str,
        source_count: int,
        catalog_count: int,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "manifest_composed",
            event_type="compose",
            user_id=user_id,
            source_count=source_count,
            catalog_count=catalog_count,
            **extra,
        )

    @classmethod
    def catalog_routed(
        cls,
        source_id: str,
        catalog_id: str,
        content_type: str,
        item_count: int,
        latency_ms: int,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "catalog_routed",
            event_type="route",
            source_id=source_id,
            catalog_id=catalog_id,
            content_type=content_type,
            item_count=item_count,
            latency_ms=latency_ms,
            **extra,
        )

    @classmethod
    def feature_degraded(
        cls,
        feature: str,
        reason: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "feature_degraded",
            event_type="degradation",
            feature=feature,
            reason=reason,
            **extra,
        )
