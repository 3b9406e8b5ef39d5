"""Boundary operations exposed to callers (MCP server and CLI).

Both operations validate their parameters before any file I/O and never
raise: every failure is converted into a ``{"success": False, ...}``
payload carrying the elapsed ``duration`` in milliseconds.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import parse_categories
from .engine import ReviewEngine
from .errors import ParameterError
from .logs import get_logger
from .report import REPORT_FORMATS, create_report, render, write_report


def _duration(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _require_path(value: Any, name: str) -> str:
    if isinstance(value, os.PathLike):
        value = os.fspath(value)
    if not isinstance(value, str) or not value.strip():
        raise ParameterError(f"{name} is required and must be a non-empty string")
    return value


def _pattern_list(value: Any, name: str) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ParameterError(f"{name} must be a list of strings")
    if not all(isinstance(item, str) for item in value):
        raise ParameterError(f"{name} must be a list of strings")
    return tuple(value)


def _report_format(value: Any, name: str) -> str:
    if value not in REPORT_FORMATS:
        raise ParameterError(f"{name} must be one of: {', '.join(REPORT_FORMATS)}")
    return value


def scan_project(
    project_path,
    include_patterns: Optional[Sequence[str]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
    categories: Optional[Sequence[str]] = None,
    output_format: str = "json",
    engine: Optional[ReviewEngine] = None,
) -> Dict[str, Any]:
    """Scan a project and return the result payload.

    ``output_format`` of ``html`` or ``markdown`` adds the rendered report
    text under ``report``.
    """

    started = time.perf_counter()
    logger = get_logger("tools")
    try:
        root = _require_path(project_path, "projectPath")
        include = _pattern_list(include_patterns, "includePatterns")
        exclude = _pattern_list(exclude_patterns, "excludePatterns")
        selected = parse_categories(categories, "categories") if categories is not None else None
        fmt = _report_format(output_format, "outputFormat")
    except ParameterError as exc:
        logger.warning("invalid scan parameters", error=str(exc))
        return {"success": False, "error": str(exc), "message": str(exc), "duration": _duration(started)}

    try:
        result = (engine or ReviewEngine()).scan_project(root, include, exclude, selected)
        payload = result.to_dict()
        if result.success:
            payload["message"] = (
                f"Scan completed: {result.summary.total_issues} issues in {result.summary.files_scanned} files"
            )
            if fmt != "json":
                payload["report"] = render(create_report([result], project_name=Path(root).resolve().name), fmt)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("scan failed", project_path=root, error=str(exc))
        return {"success": False, "error": str(exc), "message": f"Scan failed: {exc}", "duration": _duration(started)}

    payload["duration"] = _duration(started)
    return payload


def generate_report(
    results,
    format: str,  # pylint: disable=redefined-builtin
    output_path,
    project_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Merge ``results``, render them as ``format`` and write ``output_path``."""

    started = time.perf_counter()
    logger = get_logger("tools")
    try:
        if not isinstance(results, (list, tuple)):
            raise ParameterError("results is required and must be a list of scan results")
        fmt = _report_format(format, "format")
        destination = _require_path(output_path, "outputPath")
        report = create_report(results, project_name=project_name)
        text = render(report, fmt)
        written = write_report(text, destination)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("report generation failed", error=str(exc))
        return {"success": False, "error": str(exc), "duration": _duration(started)}

    logger.info("report written", path=str(written), format=fmt, quality_score=report.quality_score)
    return {
        "success": True,
        "message": f"Report written to {written}",
        "format": fmt,
        "reportPath": str(written),
        "qualityScore": report.quality_score,
        "duration": _duration(started),
    }
