"""
Service Layer Package

Business logic between callers (CLI, UI) and the gamification engines.

- ServiceContainer: lazily wires store, clock, engines and services
- ProgressService: task completions, work sessions, progress snapshot, wipe
"""

from studytrack.services.container import ServiceContainer, get_container, init_container, reset_container
from studytrack.services.progress_service import ProgressService, badges_for_streak

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "reset_container",
    "ProgressService",
    "badges_for_streak",
]
