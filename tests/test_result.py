from codereview.result import (
    Category,
    Issue,
    ScanResult,
    Summary,
    format_summary_table,
    make_issue,
)
from codereview.severity import Severity


def _issue(severity, category=Category.SECURITY, line=1):
    return make_issue(category, "SQL injection risk", "desc", "A.java", severity, line)


def test_rule_id_defaults_to_category_and_type_slug():
    issue = _issue(Severity.CRITICAL)

    assert issue.rule_id == "security-sql-injection-risk"


def test_explicit_rule_id_is_kept():
    issue = make_issue(Category.DATABASE, "SELECT *", "d", "A.java", Severity.MINOR, rule_id="select-star")

    assert issue.rule_id == "select-star"


def test_issue_to_dict_uses_wire_keys_and_omits_missing_location():
    data = make_issue(Category.MAINTAINABILITY, "insufficient comments", "d", "A.java", Severity.MINOR).to_dict()

    assert data["ruleId"] == "maintainability-insufficient-comments"
    assert "line" not in data
    assert "suggestion" not in data
    assert Issue.from_dict(data).rule_id == data["ruleId"]


def test_summary_counts_sum_to_total():
    issues = [
        _issue(Severity.CRITICAL),
        _issue(Severity.MAJOR),
        _issue(Severity.MAJOR),
        _issue(Severity.INFO),
    ]

    summary = Summary.from_issues(issues, files_scanned=3, review_time=12)

    assert summary.total_issues == 4
    assert summary.critical_issues == 1
    assert summary.major_issues == 2
    assert summary.minor_issues == 0
    assert summary.info_issues == 1
    assert summary.to_dict()["filesScanned"] == 3
    assert sum(count for _, count in summary.as_rows()) == summary.total_issues


def test_failure_result_is_empty():
    result = ScanResult.failure("project path does not exist: /nowhere", review_time=3)

    assert result.success is False
    assert result.issues == []
    assert result.summary.total_issues == 0
    assert result.to_dict()["message"] == "project path does not exist: /nowhere"


def test_exit_code_follows_highest_severity():
    def result_of(*severities):
        issues = [_issue(severity) for severity in severities]
        return ScanResult(success=True, issues=issues, summary=Summary.from_issues(issues))

    assert result_of(Severity.MINOR, Severity.INFO).exit_code() == 0
    assert result_of(Severity.MAJOR).exit_code() == 1
    assert result_of(Severity.MAJOR, Severity.CRITICAL).exit_code() == 2


def test_from_dict_recounts_summary_from_issues():
    data = {
        "success": True,
        "issues": [_issue(Severity.CRITICAL).to_dict(), _issue(Severity.MINOR).to_dict()],
        "summary": {"totalIssues": 99, "criticalIssues": 0, "filesScanned": 4, "reviewTime": 10},
    }

    result = ScanResult.from_dict(data)

    assert result.summary.total_issues == 2
    assert result.summary.critical_issues == 1
    assert result.summary.files_scanned == 4


def test_summary_table_lists_top_issues_most_severe_first():
    issues = [_issue(Severity.MINOR, line=5), _issue(Severity.CRITICAL, line=9)]
    result = ScanResult(success=True, issues=issues, summary=Summary.from_issues(issues, files_scanned=1))

    table = format_summary_table(result)

    assert "Review Summary" in table
    assert "Top Issues" in table
    assert table.index("[CRITICAL]") < table.index("[MINOR]")
    assert "A.java:9" in table
