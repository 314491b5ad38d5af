"""Pure domain entities without infrastructure dependencies."""

import copy
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Final

from .constants import (
    BOILING_POINT_F,
    DEFAULT_BREW_TEMP,
    DEFAULT_STEEP_TIME,
    FREEZING_POINT_F,
    MAX_STEEP_TIME,
    MIN_STEEP_TIME,
)
from .exceptions import EmptyNameError, SteepTimeOutOfRangeError, SteepTimeParseError

# [d.]hh:mm[:ss[.fffffff]], the text form of a .NET TimeSpan
_TIMESPAN_PATTERN: Final = re.compile(
    r"^(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?$"
)
_DAYS_PATTERN: Final = re.compile(r"^\d+$")


def parse_steep_time(text: str) -> timedelta:
    """Parse a steep time from its text form.

    Accepts ``hh:mm:ss`` with optional leading days (``d.``) and fractional
    seconds, ``hh:mm``, or a bare number of days.

    Raises:
        SteepTimeParseError: If the text is not a valid duration
    """
    candidate = text.strip()

    if _DAYS_PATTERN.match(candidate):
        return timedelta(days=int(candidate))

    match = _TIMESPAN_PATTERN.match(candidate)
    if match is None:
        raise SteepTimeParseError(f"Could not parse provided steep time {text!r}")

    hours = int(match["hours"])
    minutes = int(match["minutes"])
    seconds = int(match["seconds"] or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise SteepTimeParseError(f"Could not parse provided steep time {text!r}")

    # Fraction digits are 100ns ticks, right-padded to seven places
    ticks = int((match["fraction"] or "").ljust(7, "0"))
    return timedelta(
        days=int(match["days"] or 0),
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=ticks // 10,
    )


def format_steep_time(steep_time: timedelta) -> str:
    """Format a steep time as ``hh:mm:ss`` (with days and fraction when set)."""
    whole_seconds, microseconds = divmod(
        (steep_time.days * 86400 + steep_time.seconds) * 1_000_000
        + steep_time.microseconds,
        1_000_000,
    )
    minutes, seconds = divmod(whole_seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if days:
        text = f"{days}.{text}"
    if microseconds:
        text = f"{text}.{microseconds * 10:07d}"
    return text


def _clamp_brew_temp(brew_temp: int) -> int:
    if brew_temp > BOILING_POINT_F or brew_temp <= FREEZING_POINT_F:
        return BOILING_POINT_F
    return brew_temp


@dataclass
class TeaVariety:
    """Core business entity representing a tea variety.

    ``steep_time`` may be passed as text (see ``parse_steep_time``); it is
    always a ``timedelta`` once the object exists. A steep time outside
    (0, 30 minutes] is rejected here, while an out-of-range brew temperature
    is clamped to boiling.
    """

    name: str
    steep_time: timedelta = DEFAULT_STEEP_TIME
    brew_temp: int = DEFAULT_BREW_TEMP
    id: int | None = None

    def __post_init__(self):
        """Parse and bound-check the steep time, clamp the brew temperature."""
        if isinstance(self.steep_time, str):
            self.steep_time = parse_steep_time(self.steep_time)

        if self.steep_time > MAX_STEEP_TIME or self.steep_time <= timedelta(0):
            raise SteepTimeOutOfRangeError(
                f"Steep times of more than 30 minutes ({self.steep_time}) "
                + "really don't make sense"
            )

        self.brew_temp = _clamp_brew_temp(self.brew_temp)

    def validate(self) -> "TeaVariety":
        """Validate tea business rules, normalizing in place."""
        return validate_tea(self)

    def is_saved(self) -> bool:
        """Check if the store has assigned an identity."""
        return bool(self.id)

    def copy(self) -> "TeaVariety":
        """Return an independent copy without re-running construction checks."""
        return copy.copy(self)


def validate_tea(tea: TeaVariety) -> TeaVariety:
    """Validate a tea variety before it is persisted.

    Trims the name and clamps the brew temperature on the passed object, then
    checks the steep time. Idempotent.

    Args:
        tea: The tea variety to validate; it is modified in place

    Returns:
        The same tea variety

    Raises:
        EmptyNameError: If the trimmed name is empty
        SteepTimeOutOfRangeError: If the steep time is under one second or
            over 30 minutes
    """
    tea.name = tea.name.strip()
    if not tea.name:
        raise EmptyNameError("Tea variety must have a name")

    tea.brew_temp = _clamp_brew_temp(tea.brew_temp)

    if tea.steep_time > MAX_STEEP_TIME or tea.steep_time < MIN_STEEP_TIME:
        raise SteepTimeOutOfRangeError(
            "Steep time must be more than zero seconds and no more than 30 minutes"
        )

    return tea
