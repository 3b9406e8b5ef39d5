"""Exception types raised across the review pipeline."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review failures."""


class ParameterError(ReviewError, ValueError):
    """A required parameter is missing or has an invalid type or value."""


class ProjectNotFoundError(ReviewError):
    """The scan root is missing or is not a Maven / Gradle project."""


class ReportWriteError(ReviewError):
    """The rendered report could not be written to its destination."""
