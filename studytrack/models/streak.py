"""Streak models"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator, model_validator

from studytrack.models.events import Event
from studytrack.utils.datetime_helpers import parse_iso_date


class StreakState(BaseModel):
    """
    Daily-completion streak for one user

    Serialized with the camelCase names of the stored record:
        {currentStreak, lastCompletionDate, lastBreakDate, history}
    """
    model_config = ConfigDict(populate_by_name=True)

    current_streak: int = Field(default=0, ge=0, alias="currentStreak")
    last_completion_date: Optional[str] = Field(default=None, alias="lastCompletionDate")
    last_break_date: Optional[str] = Field(default=None, alias="lastBreakDate")
    history: list[str] = Field(default_factory=list)  # ISO dates, unique

    @field_validator("last_completion_date", "last_break_date")
    @classmethod
    def validate_iso_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return parse_iso_date(v).isoformat()

    @field_validator("history", mode="before")
    @classmethod
    def default_history(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("history")
    @classmethod
    def normalize_history(cls, v: list[str]) -> list[str]:
        """Validate each date and drop duplicates, keeping first occurrence"""
        seen: dict[str, None] = {}
        for day in v:
            seen.setdefault(parse_iso_date(day).isoformat(), None)
        return list(seen)

    @model_validator(mode="after")
    def check_completion_invariants(self) -> "StreakState":
        if self.last_completion_date is not None:
            if self.last_completion_date not in self.history:
                self.history.append(self.last_completion_date)
            # A recorded completion always counts for at least one day
            if self.current_streak == 0:
                self.current_streak = 1
        return self

    def add_to_history(self, day: str) -> None:
        if day not in self.history:
            self.history.append(day)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "StreakState":
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Stored record shape"""
        return self.model_dump(by_alias=True)


class StreakUpdate(BaseModel):
    """Outcome of one completion"""
    model_config = ConfigDict(populate_by_name=True)

    updated: bool
    streak: int
    saved_by_break: Optional[bool] = Field(default=None, alias="savedByBreak")
    reset: Optional[bool] = None
    persisted: bool = True
    events: list[SerializeAsAny[Event]] = Field(default_factory=list)

    def to_result(self) -> dict[str, Any]:
        """{updated, streak[, savedByBreak][, reset]}"""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            include={"updated", "streak", "saved_by_break", "reset"},
        )
