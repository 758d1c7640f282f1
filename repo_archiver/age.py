"""
Repository age parsing and cutoff resolution.

An age is ``<integer><unit>`` where unit is ``y`` (years) or ``m`` (months),
e.g. ``8y`` or ``6m``. The cutoff is the current UTC instant minus that many
calendar months, with the day clamped to the end of the target month.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from repo_archiver.exceptions import InvalidDuration

_AGE_RE = re.compile(r"^(\d+)([ym])$")

_UNIT_NAMES = {"y": "year", "m": "month"}


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by ``months`` calendar months."""
    total = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class Age:
    """A minimum repository age."""

    amount: int
    unit: str  # "y" or "m"

    @classmethod
    def parse(cls, text: str) -> "Age":
        """
        Parse an age string.

        Args:
            text: Value such as ``"8y"`` or ``"6m"``

        Returns:
            Parsed Age

        Raises:
            InvalidDuration: If the string does not match the grammar or the
                amount is not positive
        """
        value = text.strip().lower()
        if not value:
            raise InvalidDuration("Age cannot be empty")

        match = _AGE_RE.match(value)
        if match is None:
            raise InvalidDuration(
                f"Invalid age '{text}'. Use 'y' for years or 'm' for months (e.g., '8y', '6m')"
            )

        amount = int(match.group(1))
        if amount <= 0:
            raise InvalidDuration(f"Age must be greater than zero, got '{text}'")

        return cls(amount=amount, unit=match.group(2))

    @property
    def months(self) -> int:
        return self.amount * 12 if self.unit == "y" else self.amount

    def cutoff(self, now: datetime | None = None) -> datetime:
        """Return the UTC instant before which repositories qualify."""
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return _shift_months(now.astimezone(timezone.utc), self.months)

    def display(self) -> str:
        noun = _UNIT_NAMES[self.unit]
        return f"{self.amount} {noun}{'' if self.amount == 1 else 's'}"

    def __str__(self) -> str:
        return f"{self.amount}{self.unit}"


PRESETS: tuple[Age, ...] = (
    Age(3, "m"),
    Age(6, "m"),
    Age(1, "y"),
    Age(2, "y"),
    Age(5, "y"),
    Age(8, "y"),
)

# "2 years"
DEFAULT_PRESET_INDEX = 3
