"""Review engine: resolve the project, select files, run checkers, summarize."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .checkers import Checker, load_checkers
from .config import ReviewConfig, load_project_config, parse_categories
from .errors import ProjectNotFoundError
from .logs import get_logger
from .result import Category, Issue, ScanResult, Summary
from .utils import discover_files
from .utils.project import probe_project


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ReviewEngine:
    """Run the registered checkers over a Maven or Gradle source tree.

    ``config`` pins the configuration for every scan; when it is omitted the
    project's ``.code-review.yml`` is read on each scan.
    """

    def __init__(
        self,
        checkers: Optional[Sequence[Checker]] = None,
        logger=None,
        config: Optional[ReviewConfig] = None,
    ) -> None:
        self._logger = logger or get_logger("ReviewEngine")
        self._checkers: List[Checker] = list(checkers) if checkers is not None else load_checkers(self._logger)
        self._config = config

    @property
    def checkers(self) -> List[Checker]:
        return list(self._checkers)

    def scan_project(
        self,
        root_path,
        include_patterns: Optional[Iterable[str]] = None,
        exclude_patterns: Optional[Iterable[str]] = None,
        categories: Optional[Iterable] = None,
    ) -> ScanResult:
        started = time.perf_counter()
        root = Path(root_path)
        self._logger.info("scan started", root=str(root))

        if not root.exists():
            message = f"project path does not exist: {root}"
            self._logger.error("scan aborted", reason=message)
            return ScanResult.failure(message, _elapsed_ms(started))

        try:
            project = probe_project(root)
        except ProjectNotFoundError as exc:
            self._logger.error("scan aborted", reason=str(exc))
            return ScanResult.failure(str(exc), _elapsed_ms(started))
        self._logger.debug(
            "project detected",
            project_type=project.project_type,
            java_version=project.java_version,
            dependencies=len(project.dependencies),
        )

        config = self._config or load_project_config(root)
        include = tuple(include_patterns) if include_patterns else config.include_patterns
        exclude = tuple(exclude_patterns) if exclude_patterns else config.exclude_patterns
        selected = parse_categories(list(categories)) if categories is not None else config.categories

        files = discover_files(root, include, exclude)
        self._logger.info("files discovered", count=len(files))

        issues = self._run_checkers(files, root, selected)
        if config.disabled_rules:
            issues = [issue for issue in issues if issue.rule_id not in config.disabled_rules]

        review_time = _elapsed_ms(started)
        summary = Summary.from_issues(issues, files_scanned=len(files), review_time=review_time)
        self._logger.info(
            "scan finished",
            issues=summary.total_issues,
            critical=summary.critical_issues,
            review_time=review_time,
        )
        return ScanResult(success=True, issues=issues, summary=summary)

    def _run_checkers(self, files: List[Path], root: Path, categories: Sequence[Category]) -> List[Issue]:
        issues: List[Issue] = []
        for checker in self._checkers:
            if checker.category not in categories:
                continue
            try:
                found = checker.check(files, root)
            except Exception as exc:  # pylint: disable=broad-except
                self._logger.error(
                    "checker failed",
                    checker=type(checker).__name__,
                    category=checker.category.value,
                    error=str(exc),
                )
                continue
            self._logger.debug("checker finished", category=checker.category.value, issues=len(found))
            issues.extend(found)
        return issues
