from pathlib import Path

from codereview.checkers.exception_handling import check_exception_handling


def _run(source, name="Job.java"):
    return check_exception_handling(Path(name), source, source.split("\n"))


def test_swallowed_exception_without_logging():
    source = "\n".join([
        "public class Job {",
        "    void run() {",
        "        try {",
        "            work();",
        "        } catch (IOException e) {",
        "        }",
        '        throw new RuntimeException("failed");',
        "    }",
        "}",
    ])

    assert [(issue.line, issue.rule_id) for issue in _run(source)] == [
        (5, "empty-catch"),
        (5, "exception-logging"),
        (7, "generic-exception"),
    ]


def test_logged_exception_with_specific_type():
    source = "\n".join([
        "private static final Logger log = LoggerFactory.getLogger(Job.class);",
        "try {",
        "    work();",
        "} catch (IOException e) {",
        '    log.warn("work failed", e);',
        '    throw new JobFailedException("failed", e);',
        "}",
    ])

    assert _run(source) == []


def test_inline_empty_catch():
    source = 'try { work(); } catch (Exception e) {} // log nothing'

    assert [issue.rule_id for issue in _run(source)] == ["empty-catch"]
