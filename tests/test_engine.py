from pathlib import Path

from structlog.testing import capture_logs

from codereview.checkers import CHECKER_TYPES, load_checkers
from codereview.checkers.code_structure import CodeStructureChecker
from codereview.config import ReviewConfig
from codereview.engine import ReviewEngine
from codereview.result import Category
from codereview.severity import Severity


class ExplodingChecker:
    category = Category.SECURITY

    def check(self, files, root_path):
        raise RuntimeError("boom")


def _write_bad_class(root: Path) -> Path:
    source = root / "src" / "main" / "java" / "Bad.java"
    source.parent.mkdir(parents=True)
    source.write_text("public class bad_name {\n}\n", encoding="utf-8")
    return source


def test_registry_covers_every_category_in_order():
    checkers = load_checkers()

    assert len(CHECKER_TYPES) == 13
    assert [checker.category for checker in checkers] == list(Category)


def test_missing_build_descriptor_fails(tmp_path):
    result = ReviewEngine().scan_project(tmp_path)

    assert result.success is False
    assert "Maven or Gradle" in result.message
    assert result.issues == []
    assert result.summary.total_issues == 0


def test_missing_root_fails(tmp_path):
    result = ReviewEngine().scan_project(tmp_path / "nowhere")

    assert result.success is False
    assert "project path does not exist" in result.message


def test_gradle_project_is_accepted(tmp_path):
    (tmp_path / "build.gradle.kts").write_text("plugins { java }\n", encoding="utf-8")

    assert ReviewEngine().scan_project(tmp_path).success is True


def test_category_filter(maven_project):
    _write_bad_class(maven_project)
    engine = ReviewEngine()

    security_only = engine.scan_project(maven_project, categories=["security"])
    everything = engine.scan_project(maven_project)

    assert security_only.success is True
    assert security_only.issues == []
    assert security_only.summary.files_scanned == 2
    assert "class-naming" in [issue.rule_id for issue in everything.issues]


def test_issues_follow_checker_registration_order(sample_project):
    result = ReviewEngine().scan_project(sample_project)
    order = list(Category)

    positions = [order.index(issue.category) for issue in result.issues]

    assert result.success is True
    assert positions == sorted(positions)
    assert result.summary.total_issues == len(result.issues)
    assert all(isinstance(issue.severity, Severity) for issue in result.issues)


def test_sample_project_findings(sample_project):
    result = ReviewEngine().scan_project(sample_project)
    rule_ids = {issue.rule_id for issue in result.issues}

    assert result.summary.files_scanned == 3
    assert {"sql-injection", "log4j-vulnerability", "hardcoded-password", "empty-catch"} <= rule_ids
    assert result.exit_code() == 2


def test_failing_checker_is_isolated(maven_project):
    _write_bad_class(maven_project)

    with capture_logs() as logs:
        engine = ReviewEngine(checkers=[ExplodingChecker(), CodeStructureChecker()])
        result = engine.scan_project(maven_project)

    assert result.success is True
    assert [issue.rule_id for issue in result.issues] == ["class-naming"]
    failures = [entry for entry in logs if entry["event"] == "checker failed"]
    assert failures and failures[0]["error"] == "boom"


def test_excluded_directories_are_not_scanned(maven_project):
    _write_bad_class(maven_project)
    generated = maven_project / "target" / "generated" / "Gen.java"
    generated.parent.mkdir(parents=True)
    generated.write_text("public class gen_class {}\n", encoding="utf-8")

    result = ReviewEngine().scan_project(maven_project, categories=["code_structure"])

    assert all("target" not in Path(issue.file).parts for issue in result.issues)
    assert result.summary.files_scanned == 2


def test_explicit_patterns_override_defaults(maven_project):
    _write_bad_class(maven_project)

    result = ReviewEngine().scan_project(maven_project, include_patterns=["**/*.gradle"])

    assert result.summary.files_scanned == 0
    assert result.issues == []


def test_disabled_rules_are_dropped(maven_project):
    _write_bad_class(maven_project)
    config = ReviewConfig(disabled_rules=frozenset({"class-naming"}))

    result = ReviewEngine(config=config).scan_project(maven_project, categories=["code_structure"])

    assert "class-naming" not in [issue.rule_id for issue in result.issues]


def test_project_config_file_selects_categories(maven_project):
    _write_bad_class(maven_project)
    (maven_project / ".code-review.yml").write_text("categories: [security]\n", encoding="utf-8")

    result = ReviewEngine().scan_project(maven_project)

    assert result.issues == []
