"""Enumerations used across the trading journal."""

from enum import Enum


class RuleType(str, Enum):
    MUST = "must"
    SHOULD = "should"
    OPTIONAL = "optional"

    @classmethod
    def parse(cls, value: object) -> "RuleType | None":
        """Case-insensitive lookup; ``None`` when the value is unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


class GradeTier(str, Enum):
    """Display tier for a setup grade."""

    GOOD = "good"  # A-grades
    PASS = "pass"  # B-grades
    WARN = "warn"  # C-grades
    FAIL = "fail"  # D, F and anything unrecognised


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"
