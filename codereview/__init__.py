"""Heuristic code review for Java / Spring Boot source trees."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("java-code-review")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
