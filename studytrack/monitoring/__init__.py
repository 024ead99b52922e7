"""Monitoring infrastructure for studytrack"""
from studytrack.monitoring.sentry_config import init_sentry, capture_exception, capture_message, shutdown_sentry
from studytrack.monitoring.prometheus_metrics import (
    metrics,
    track_streak_update,
    track_xp_awarded,
    track_xp_rejected,
    track_level_up,
    track_badge_awarded,
    track_storage_operation,
    track_malformed_state,
)

__all__ = [
    "init_sentry",
    "capture_exception",
    "capture_message",
    "shutdown_sentry",
    "metrics",
    "track_streak_update",
    "track_xp_awarded",
    "track_xp_rejected",
    "track_level_up",
    "track_badge_awarded",
    "track_storage_operation",
    "track_malformed_state",
]
