from pathlib import Path

from codereview.checkers.maintainability import check_code_hygiene, check_method_length


def _run(heuristic, lines, name="Timer.java"):
    return heuristic(Path(name), "\n".join(lines), lines)


def test_todo_and_magic_number():
    lines = [
        "public class Timer {",
        "    // TODO: make configurable",
        "    private static final int LIMIT = 100;",
        "    int await() {",
        "        return 3000;",
        "    }",
        "}",
    ]

    assert [(issue.line, issue.rule_id) for issue in _run(check_code_hygiene, lines)] == [
        (2, "todo-comment"),
        (5, "magic-number"),
    ]


def test_insufficient_comments_is_file_level():
    lines = ["public class Counter {"] + ["    int value%d = 0;" % i for i in range(11)] + ["}"]

    issues = _run(check_code_hygiene, lines, name="Counter.java")

    assert [(issue.line, issue.rule_id) for issue in issues] == [(None, "insufficient-comments")]


def test_long_public_method():
    long_method = ["    public void run() {"] + ["        step();"] * 31 + ["    }"]
    short_method = ["    public void run() {"] + ["        step();"] * 30 + ["    }"]

    assert [issue.rule_id for issue in _run(check_method_length, long_method)] == ["long-method"]
    assert _run(check_method_length, short_method) == []


def test_braces_inside_block_comment_do_not_end_method():
    lines = [
        "    public void run() {",
        "        /*",
        "         * a stray } here is not code",
        "         */",
    ] + ["        step();"] * 28 + ["    }"]

    assert [issue.rule_id for issue in _run(check_method_length, lines)] == ["long-method"]
