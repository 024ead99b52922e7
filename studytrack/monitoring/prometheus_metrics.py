"""Prometheus metrics definitions and helpers"""
import logging
from prometheus_client import Counter

from studytrack.config import ENABLE_PROMETHEUS

logger = logging.getLogger(__name__)


class PrometheusMetrics:
    """Container for all Prometheus metrics"""

    def __init__(self):
        if not ENABLE_PROMETHEUS:
            logger.info("Prometheus metrics disabled")
            self._enabled = False
            return

        # Streak Metrics
        self.streak_updates_total = Counter(
            'studytrack_streak_updates_total',
            'Total streak updates by outcome',
            ['outcome']  # started/continued/saved_by_break/reset/unchanged
        )

        # XP Metrics
        self.xp_awarded_total = Counter(
            'studytrack_xp_awarded_total',
            'Total XP awarded'
        )

        self.xp_rejected_total = Counter(
            'studytrack_xp_rejected_total',
            'Total rejected XP awards'
        )

        self.level_ups_total = Counter(
            'studytrack_level_ups_total',
            'Total level-ups'
        )

        self.badges_awarded_total = Counter(
            'studytrack_badges_awarded_total',
            'Total badges newly awarded'
        )

        # Storage Metrics
        self.storage_operations_total = Counter(
            'studytrack_storage_operations_total',
            'Total storage operations',
            ['backend', 'operation', 'status']
        )

        self.malformed_state_total = Counter(
            'studytrack_malformed_state_total',
            'Stored records discarded as unreadable',
            ['key']
        )

        self._enabled = True
        logger.info("Prometheus metrics initialized")

    @property
    def enabled(self) -> bool:
        """Check if metrics are enabled"""
        return self._enabled


# Global metrics instance
metrics = PrometheusMetrics()


def track_streak_update(outcome: str) -> None:
    if not metrics.enabled:
        return
    metrics.streak_updates_total.labels(outcome=outcome).inc()


def track_xp_awarded(amount: int) -> None:
    if not metrics.enabled:
        return
    metrics.xp_awarded_total.inc(amount)


def track_xp_rejected() -> None:
    if not metrics.enabled:
        return
    metrics.xp_rejected_total.inc()


def track_level_up() -> None:
    if not metrics.enabled:
        return
    metrics.level_ups_total.inc()


def track_badge_awarded() -> None:
    if not metrics.enabled:
        return
    metrics.badges_awarded_total.inc()


def track_storage_operation(backend: str, operation: str, status: str) -> None:
    """Track one storage call; status is ok/miss/malformed/error"""
    if not metrics.enabled:
        return
    metrics.storage_operations_total.labels(
        backend=backend,
        operation=operation,
        status=status
    ).inc()


def track_malformed_state(key: str) -> None:
    if not metrics.enabled:
        return
    metrics.malformed_state_total.labels(key=key).inc()
