"""Sentry configuration and helpers"""
import logging
import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from studytrack.config import ENABLE_SENTRY, SENTRY_DSN, SENTRY_ENVIRONMENT, SENTRY_TRACES_SAMPLE_RATE

logger = logging.getLogger(__name__)


def init_sentry() -> None:
    """
    Initialize Sentry SDK for error tracking.

    Environment variables:
        ENABLE_SENTRY: Feature flag to enable/disable Sentry
        SENTRY_DSN: Sentry project DSN (required when enabled)
        SENTRY_ENVIRONMENT: Environment name (development, staging, production)
        SENTRY_TRACES_SAMPLE_RATE: Percentage of transactions to sample (0.0-1.0)
        GIT_COMMIT_SHA: Git commit SHA for release tracking (optional)
    """
    if not ENABLE_SENTRY:
        logger.info("Sentry monitoring disabled")
        return

    if not SENTRY_DSN:
        logger.warning("Sentry enabled but SENTRY_DSN not configured")
        return

    release = os.getenv("GIT_COMMIT_SHA")
    release = f"studytrack@{release[:7]}" if release else "studytrack@dev"

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        release=release,
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            LoggingIntegration(
                level=logging.INFO,  # Breadcrumbs
                event_level=logging.ERROR  # Events
            ),
        ],
        attach_stacktrace=True,
    )

    logger.info(
        f"Sentry initialized: environment={SENTRY_ENVIRONMENT}, "
        f"release={release}, sample_rate={SENTRY_TRACES_SAMPLE_RATE}"
    )


def capture_exception(exception: Exception, **extra_context: Any) -> None:
    """Capture exception with custom context"""
    if not ENABLE_SENTRY:
        return

    try:
        with sentry_sdk.new_scope() as scope:
            for key, value in extra_context.items():
                scope.set_tag(key, str(value))
            sentry_sdk.capture_exception(exception)
    except Exception as e:
        logger.error(f"Failed to capture exception in Sentry: {e}")


def capture_message(message: str, level: str = "info", **extra_context: Any) -> None:
    """Capture informational message"""
    if not ENABLE_SENTRY:
        return

    try:
        with sentry_sdk.new_scope() as scope:
            for key, value in extra_context.items():
                scope.set_tag(key, str(value))
            sentry_sdk.capture_message(message, level=level)
    except Exception as e:
        logger.error(f"Failed to capture message in Sentry: {e}")


def shutdown_sentry() -> None:
    """Flush pending events before the process exits"""
    client = sentry_sdk.get_client()
    if client.is_active():
        logger.info("Flushing Sentry events before shutdown...")
        client.close(timeout=2.0)
