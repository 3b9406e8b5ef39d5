from pathlib import Path

from codereview.checkers.transaction import check_transactions
from codereview.severity import Severity


def _run(lines):
    return check_transactions(Path("AccountService.java"), "\n".join(lines), lines)


def test_transaction_attribute_hints():
    lines = [
        "@Service",
        "public class AccountService {",
        "    @Transactional",
        "    public Account findAccount(long id) {",
        "        return repository.findById(id);",
        "    }",
        "    @Transactional(rollbackFor = Exception.class, propagation = Propagation.REQUIRED)",
        "    public void transfer(long from, long to) {",
        "        move(from, to);",
        "    }",
        "}",
    ]

    issues = _run(lines)

    assert [(issue.line, issue.rule_id, issue.severity) for issue in issues] == [
        (3, "transaction-rollback", Severity.MINOR),
        (3, "transaction-propagation", Severity.INFO),
        (3, "readonly-transaction", Severity.MINOR),
    ]


def test_query_prefix_needs_a_word_boundary():
    header = "    @Transactional(rollbackFor = Exception.class, propagation = Propagation.REQUIRED)"
    for name in ("listener", "counter", "selectionChanged", "loader"):
        lines = [header, f"    public void {name}() {{", "        run();", "    }"]
        assert _run(lines) == []

    lines = [header, "    public List<Account> list() {", "        return repository.findAll();", "    }"]
    assert [issue.rule_id for issue in _run(lines)] == ["readonly-transaction"]


def test_read_only_query_is_fine():
    lines = [
        "    @Transactional(readOnly = true, rollbackFor = Exception.class, propagation = Propagation.SUPPORTS)",
        "    public List<Account> listAccounts() {",
        "        return repository.findAll();",
        "    }",
    ]

    assert _run(lines) == []


def test_large_transaction():
    lines = (
        ["    @Transactional(rollbackFor = Exception.class, propagation = Propagation.REQUIRED)",
         "    public void process() {"]
        + ["        step();"] * 55
        + ["    }"]
    )

    issues = _run(lines)

    assert [(issue.rule_id, issue.severity) for issue in issues] == [("large-transaction", Severity.MAJOR)]
