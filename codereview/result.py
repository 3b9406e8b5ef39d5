"""Core result data structures for the reviewer."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.CRITICAL,
    Severity.MAJOR,
    Severity.MINOR,
    Severity.INFO,
)


class Category(str, Enum):
    """Review categories; declaration order is the checker registration order."""

    CODE_STRUCTURE = "code_structure"
    PERFORMANCE = "performance"
    SECURITY = "security"
    DATABASE = "database"
    THREAD_SAFETY = "thread_safety"
    API_DESIGN = "api_design"
    EXCEPTION_HANDLING = "exception_handling"
    CONFIGURATION = "configuration"
    SERVICE_RELATION = "service_relation"
    TRANSACTION = "transaction"
    ENVIRONMENT = "environment"
    MAINTAINABILITY = "maintainability"
    THIRD_PARTY = "third_party"


def rule_slug(category: Category, issue_type: str) -> str:
    """Build the default rule id from a category and an issue type label."""

    slug = re.sub(r"\s+", "-", issue_type.strip().lower())
    return f"{category.value}-{slug}"


@dataclass(frozen=True)
class Issue:
    """A single finding reported by a checker."""

    category: Category
    severity: Severity
    type: str
    description: str
    file: str
    line: Optional[int] = None
    column: Optional[int] = None
    suggestion: Optional[str] = None
    rule_id: str = ""

    def __post_init__(self) -> None:
        if not self.rule_id:
            object.__setattr__(self, "rule_id", rule_slug(self.category, self.type))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "category": self.category.value,
            "severity": self.severity.value,
            "type": self.type,
            "description": self.description,
            "file": self.file,
            "ruleId": self.rule_id,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Issue":
        return cls(
            category=Category(data["category"]),
            severity=Severity(data["severity"]),
            type=str(data["type"]),
            description=str(data.get("description", "")),
            file=str(data.get("file", "")),
            line=data.get("line"),
            column=data.get("column"),
            suggestion=data.get("suggestion"),
            rule_id=str(data.get("ruleId") or ""),
        )


def make_issue(
    category: Category,
    issue_type: str,
    description: str,
    file: str,
    severity: Severity,
    line: Optional[int] = None,
    suggestion: Optional[str] = None,
    rule_id: Optional[str] = None,
    column: Optional[int] = None,
) -> Issue:
    """Shared factory used by every checker."""

    return Issue(
        category=category,
        severity=severity,
        type=issue_type,
        description=description,
        file=file,
        line=line,
        column=column,
        suggestion=suggestion,
        rule_id=rule_id or "",
    )


@dataclass(frozen=True)
class Summary:
    """Aggregate issue counts for one scan (or a merged report)."""

    total_issues: int = 0
    critical_issues: int = 0
    major_issues: int = 0
    minor_issues: int = 0
    info_issues: int = 0
    files_scanned: int = 0
    review_time: int = 0

    @classmethod
    def from_issues(cls, issues: Iterable[Issue], files_scanned: int = 0, review_time: int = 0) -> "Summary":
        counts = {severity: 0 for severity in SEVERITY_ORDER}
        for issue in issues:
            counts[issue.severity] += 1
        return cls(
            total_issues=sum(counts.values()),
            critical_issues=counts[Severity.CRITICAL],
            major_issues=counts[Severity.MAJOR],
            minor_issues=counts[Severity.MINOR],
            info_issues=counts[Severity.INFO],
            files_scanned=files_scanned,
            review_time=review_time,
        )

    def count(self, severity: Severity) -> int:
        return getattr(self, f"{severity.value}_issues")

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, self.count(severity)) for severity in SEVERITY_ORDER]

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalIssues": self.total_issues,
            "criticalIssues": self.critical_issues,
            "majorIssues": self.major_issues,
            "minorIssues": self.minor_issues,
            "infoIssues": self.info_issues,
            "filesScanned": self.files_scanned,
            "reviewTime": self.review_time,
        }


@dataclass
class ScanResult:
    """Bundle the outcome of one scan: issues plus their summary."""

    success: bool
    issues: List[Issue] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    message: Optional[str] = None

    @classmethod
    def failure(cls, message: str, review_time: int = 0) -> "ScanResult":
        """A scan that aborted before any checker ran."""

        return cls(success=False, issues=[], summary=Summary(review_time=review_time), message=message)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanResult":
        issues = [Issue.from_dict(item) for item in data.get("issues") or []]
        raw_summary = data.get("summary") or {}
        summary = Summary.from_issues(
            issues,
            files_scanned=int(raw_summary.get("filesScanned", 0)),
            review_time=int(raw_summary.get("reviewTime", 0)),
        )
        return cls(
            success=bool(data.get("success", True)),
            issues=issues,
            summary=summary,
            message=data.get("message"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": self.summary.to_dict(),
        }
        if self.message is not None:
            data["message"] = self.message
        return data

    def exit_code(self) -> int:
        if self.summary.critical_issues > 0:
            return 2
        if self.summary.major_issues > 0:
            return 1
        return 0

    def top_issues(self, limit: int = 5) -> List[Issue]:
        """Return issues ordered by severity ranking."""

        ordered = sorted(
            self.issues,
            key=lambda issue: (-issue.severity.rank, issue.file, issue.line or 0),
        )
        return ordered[:limit]


@dataclass(frozen=True)
class ProjectInfo:
    """Read-only snapshot of the scanned project's layout."""

    project_type: str
    java_version: str
    dependencies: Tuple[str, ...] = ()
    source_files: Tuple[str, ...] = ()
    test_files: Tuple[str, ...] = ()
    config_files: Tuple[str, ...] = ()


def format_summary_table(result: ScanResult, max_issues: int = 5) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Review Summary")
    lines.append("=" * 40)
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    lines.append(f"Files     : {result.summary.files_scanned}")
    lines.append(f"Issues    : {result.summary.total_issues}")
    lines.append(f"Time      : {result.summary.review_time}ms")

    issues = result.top_issues(max_issues)
    if issues:
        lines.append("")
        lines.append("Top Issues")
        lines.append("-" * 40)
        for issue in issues:
            location = f"{issue.file}:{issue.line}" if issue.line is not None else issue.file
            lines.append(f"[{issue.severity.value.upper()}] {issue.type} ({issue.rule_id})")
            lines.append(f"  Location: {location}")
    return "\n".join(lines)
