"""Domain value objects with validation.

Value objects that provide validation at construction time,
ensuring invalid states are unrepresentable.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True)
class StrictTimestamp:
    """Validated and parsed strict ISO-8601 timestamp with UTC offset.

    This is the shape git prints for --date=iso-strict, e.g.
    "2024-01-15T10:30:00+02:00". Newer git versions print "Z" for a zero
    offset, which is accepted. Fractional seconds and missing offsets are
    rejected.

    Attributes:
        value: The parsed datetime object (always timezone-aware).
        raw: The original string representation.

    Raises:
        ValueError: If the string is not a strict ISO-8601 timestamp.
    """

    value: datetime
    raw: str

    _PATTERN = re.compile(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"  # Date and time
        r"(?:[+-]\d{2}:\d{2}|Z)",  # Mandatory offset
        re.ASCII,
    )

    @classmethod
    def from_string(cls, timestamp_str: str) -> "StrictTimestamp":
        """Create a StrictTimestamp from a string.

        Args:
            timestamp_str: Timestamp in yyyy-MM-ddTHH:mm:ss+HH:MM (or Z) form.

        Returns:
            StrictTimestamp instance.

        Raises:
            ValueError: If the string does not have that exact shape or
                        names an impossible date or time.
        """
        if not timestamp_str:
            raise ValueError("Timestamp string cannot be empty")

        if not cls._PATTERN.fullmatch(timestamp_str):
            raise ValueError(
                f"Invalid strict ISO-8601 timestamp: '{timestamp_str}'. "
                "Expected format: YYYY-MM-DDTHH:MM:SS+HH:MM or YYYY-MM-DDTHH:MM:SSZ"
            )

        try:
            parsed = datetime.fromisoformat(timestamp_str)
        except ValueError as e:
            raise ValueError(
                f"Invalid strict ISO-8601 timestamp: '{timestamp_str}': {e}"
            ) from e
        return cls(value=parsed, raw=timestamp_str)

    def to_utc(self) -> datetime:
        """Return the same instant expressed in UTC."""
        return self.value.astimezone(UTC)

    def __str__(self) -> str:
        """Return the raw timestamp string."""
        return self.raw
