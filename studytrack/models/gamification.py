"""XP, level and badge models"""
import logging
import math
from typing import Any, Optional
from pydantic import BaseModel, Field, SerializeAsAny, field_validator, model_validator

from studytrack.models.events import Event

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 100


def level_for_xp(total_xp: int) -> int:
    """level = floor(xp / 100) + 1"""
    return max(total_xp, 0) // XP_PER_LEVEL + 1


class GamificationState(BaseModel):
    """
    XP ledger for one user

    `level` is derived from `xp` on every validation; a stored level that
    disagrees with the formula is corrected here.
    """
    xp: int = Field(default=0, ge=0)
    level: int = 1
    badges: list[str] = Field(default_factory=list)  # unique badge ids

    @field_validator("xp", "level", "badges", mode="before")
    @classmethod
    def fill_missing(cls, v: Any, info) -> Any:
        if v is None:
            return {"xp": 0, "level": 1, "badges": []}[info.field_name]
        return v

    @field_validator("badges")
    @classmethod
    def dedupe_badges(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def derive_level(self) -> "GamificationState":
        expected = level_for_xp(self.xp)
        if self.level != expected:
            logger.warning(f"Stale level {self.level} for {self.xp} XP, corrected to {expected}")
            self.level = expected
        return self

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "GamificationState":
        """
        Build from a stored record, salvaging each field on its own

        Unusable badge entries are dropped. xp is coerced to a whole
        non-negative number, or 0 when unusable; level is re-derived.
        """
        xp = _salvage_xp(record.get("xp"))
        level = record.get("level")
        if isinstance(level, bool) or not isinstance(level, int):
            level = level_for_xp(xp)
        return cls.model_validate({
            "xp": xp,
            "level": level,
            "badges": _salvage_badges(record.get("badges")),
        })

    def to_record(self) -> dict[str, Any]:
        return {"xp": self.xp, "level": self.level, "badges": list(self.badges)}


def _salvage_xp(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            pass
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        logger.warning(f"Discarding unusable stored xp {value!r}")
        return 0
    return max(int(value), 0)


def _salvage_badges(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"Discarding stored badges of type {type(value).__name__}")
        return []
    badges = [badge for badge in value if isinstance(badge, str) and badge.strip()]
    if len(badges) != len(value):
        logger.warning(f"Dropped {len(value) - len(badges)} invalid stored badge entries")
    return badges


class XPAwardResult(BaseModel):
    """Outcome of one XP award; rejected amounts leave the ledger untouched"""
    accepted: bool
    rejection_reason: Optional[str] = None
    xp_awarded: int = 0
    old_total_xp: int
    new_total_xp: int
    old_level: int
    new_level: int
    leveled_up: bool = False
    persisted: Optional[bool] = None  # None when nothing was written
    events: list[SerializeAsAny[Event]] = Field(default_factory=list)


class BadgeAwardResult(BaseModel):
    badge_id: str
    newly_awarded: bool
    persisted: Optional[bool] = None
    events: list[SerializeAsAny[Event]] = Field(default_factory=list)
