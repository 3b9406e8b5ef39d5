"""Exception handling: swallowed exceptions, logging and exception types."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker, is_comment

_issue = partial(make_issue, Category.EXCEPTION_HANDLING)

CATCH_CLAUSE = re.compile(r"\bcatch\s*\(")
INLINE_EMPTY_CATCH = re.compile(r"\bcatch\s*\([^)]*\)\s*\{\s*\}")
GENERIC_THROW = re.compile(r"\bthrow\s+new\s+(?:Exception|RuntimeException|Throwable)\s*\(")


def _is_empty_catch(lines: List[str], index: int) -> bool:
    line = lines[index].strip()
    if INLINE_EMPTY_CATCH.search(line):
        return True
    following = [text.strip() for text in lines[index + 1:index + 3]]
    if line.endswith("{"):
        return bool(following) and following[0] == "}"
    return len(following) == 2 and following[0] == "{" and following[1] == "}"


def check_exception_handling(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    has_logging = "log" in content or "Log" in content

    for index, raw in enumerate(lines):
        line = raw.strip()
        if is_comment(line):
            continue
        line_number = index + 1

        if CATCH_CLAUSE.search(line):
            if _is_empty_catch(lines, index):
                issues.append(_issue(
                    "empty catch block",
                    "Empty catch block silently swallows the exception",
                    str(path),
                    Severity.MAJOR,
                    line_number,
                    "Handle the exception or at least log it",
                    "empty-catch",
                ))
            if not has_logging:
                issues.append(_issue(
                    "exception not logged",
                    "Exception handling without any logging",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Log caught exceptions so failures can be traced",
                    "exception-logging",
                ))

        if GENERIC_THROW.search(line):
            issues.append(_issue(
                "generic exception",
                "Generic exception type thrown",
                str(path),
                Severity.MINOR,
                line_number,
                "Throw a specific exception type",
                "generic-exception",
            ))
    return issues


class ExceptionHandlingChecker(LineChecker):
    category = Category.EXCEPTION_HANDLING
    heuristics = (check_exception_handling,)
