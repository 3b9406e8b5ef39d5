"""Severity definitions for review issues."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the supported severity levels, most important first."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Return an integer ranking; higher means more important."""

        ordering = {
            Severity.CRITICAL: 3,
            Severity.MAJOR: 2,
            Severity.MINOR: 1,
            Severity.INFO: 0,
        }
        return ordering[self]
