"""User settings for the Pomodoro timer.

Settings are persisted as a JSON object. Loading validates each field on its
own so that one bad value falls back to its default without discarding the
rest of the saved settings.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class AlarmSound(str, Enum):
    """Alert sounds the notification sink knows how to play."""

    BELL = "bell"
    CHIME = "chime"
    DIGITAL = "digital"


class Settings(BaseModel):
    """User-configurable timer parameters."""

    model_config = {"validate_assignment": True}

    focus_minutes: int = Field(default=25, ge=1, description="Focus phase length")
    short_break_minutes: int = Field(default=5, ge=1, description="Short break length")
    long_break_minutes: int = Field(default=15, ge=1, description="Long break length")
    long_break_interval: int = Field(
        default=4, ge=1, description="Focus sessions before a long break"
    )
    auto_start_breaks: bool = Field(default=False)
    auto_start_focus: bool = Field(default=False)
    auto_stop_at_zero: bool = Field(
        default=True, description="Complete the phase when the countdown hits zero"
    )
    alarm_enabled: bool = Field(default=True)
    alarm_sound_id: AlarmSound = Field(default=AlarmSound.BELL)
    use_24h_format: bool = Field(default=True)

    @property
    def focus_seconds(self) -> int:
        return self.focus_minutes * 60

    @classmethod
    def from_saved(cls, data: Any) -> Settings:
        """Build settings from persisted data, defaulting field by field.

        Unknown keys are ignored. Missing keys and keys whose value fails
        validation take their default.
        """
        if not isinstance(data, dict):
            return cls()

        accepted: dict[str, Any] = {}
        for name in cls.model_fields:
            if name not in data:
                continue
            try:
                cls.model_validate({name: data[name]})
            except ValidationError:
                logger.warning(
                    "Ignoring invalid saved setting %s=%r", name, data[name]
                )
                continue
            accepted[name] = data[name]

        return cls.model_validate(accepted)
