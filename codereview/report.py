"""Merge scan results into a scored report and render it."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .errors import ParameterError, ReportWriteError
from .result import Category, Issue, ScanResult, Summary
from .severity import Severity

REPORT_FORMATS = ("json", "html", "markdown")
TEMPLATE_FILES = {"html": "report.html", "markdown": "report.md"}
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SCORE_PENALTIES = {
    Severity.CRITICAL: 20,
    Severity.MAJOR: 10,
    Severity.MINOR: 5,
}
GENERAL_RECOMMENDATIONS = (
    "Establish a code review process to keep code quality consistent",
    "Integrate static analysis tools into the CI/CD pipeline",
)
DEFAULT_PROJECT_NAME = "Java Project"


@dataclass
class ReviewReport:
    """Cross-scan aggregate handed to the renderers."""

    project_name: str
    scan_time: str
    summary: Summary
    issues: List[Issue] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    quality_score: int = 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectName": self.project_name,
            "scanTime": self.scan_time,
            "summary": self.summary.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "recommendations": list(self.recommendations),
            "qualityScore": self.quality_score,
        }


def quality_score(summary: Summary) -> int:
    penalty = sum(summary.count(severity) * weight for severity, weight in SCORE_PENALTIES.items())
    return max(0, min(100, 100 - penalty))


def generate_recommendations(issues: Iterable[Issue]) -> List[str]:
    issues = list(issues)
    recommendations: List[str] = []
    critical = sum(1 for issue in issues if issue.severity is Severity.CRITICAL)
    security = sum(1 for issue in issues if issue.category is Category.SECURITY)
    performance = sum(1 for issue in issues if issue.category is Category.PERFORMANCE)

    if critical:
        recommendations.append(f"Resolve the {critical} critical issues first; they can affect system stability")
    if security:
        recommendations.append(f"Strengthen security controls: {security} security issues were found")
    if performance:
        recommendations.append(f"Optimize performance: {performance} performance issues were found")
    recommendations.extend(GENERAL_RECOMMENDATIONS)
    return recommendations


def _as_scan_result(result: Union[ScanResult, Mapping[str, Any]]) -> ScanResult:
    if isinstance(result, ScanResult):
        return result
    if isinstance(result, Mapping):
        return ScanResult.from_dict(result)
    raise ParameterError(f"scan result must be a mapping, got {type(result).__name__}")


def create_report(
    results: Iterable[Union[ScanResult, Mapping[str, Any]]],
    project_name: Optional[str] = None,
    scan_time: Optional[str] = None,
) -> ReviewReport:
    """Merge scan results; severity counts are recomputed from the merged issues."""

    scans = [_as_scan_result(result) for result in results]
    issues: List[Issue] = [issue for scan in scans for issue in scan.issues]
    summary = Summary.from_issues(
        issues,
        files_scanned=sum(scan.summary.files_scanned for scan in scans),
        review_time=sum(scan.summary.review_time for scan in scans),
    )
    return ReviewReport(
        project_name=project_name or DEFAULT_PROJECT_NAME,
        scan_time=scan_time or datetime.now(timezone.utc).isoformat(),
        summary=summary,
        issues=issues,
        recommendations=generate_recommendations(issues),
        quality_score=quality_score(summary),
    )


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(report: ReviewReport, fmt: str) -> str:
    """Render ``report`` as json, markdown or html.

    HTML output carries the same issue text as the other formats, entity-escaped.
    """

    if fmt not in REPORT_FORMATS:
        raise ParameterError(f"format must be one of: {', '.join(REPORT_FORMATS)}")
    data = report.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    template = _environment().get_template(TEMPLATE_FILES[fmt])
    return template.render(report=data)


def write_report(text: str, output_path) -> Path:
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"failed to write report to {path}: {exc}") from exc
    return path
