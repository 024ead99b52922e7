"""
studytrack - study streaks and XP

Two small stateful engines behind a study planner:
- StreakTracker: daily completion streak with a weekly break
- GamificationLedger: XP, levels and badges
"""

__version__ = "0.1.0"
