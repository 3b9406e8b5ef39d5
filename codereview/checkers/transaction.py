"""Declarative transaction usage."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LARGE_TRANSACTION_LINES, LineChecker, match_method

_issue = partial(make_issue, Category.TRANSACTION)

QUERY_METHOD = re.compile(r"^(?:get|find|query|select|list|count|search|load)(?:[A-Z]|$)")
READONLY_LOOKAHEAD = 3


def _annotated_method(lines: List[str], index: int):
    for position in range(index + 1, min(index + 1 + READONLY_LOOKAHEAD, len(lines))):
        declared = match_method(lines[position].strip())
        if declared:
            return position, declared[0]
    return None


def check_transactions(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line.startswith("@Transactional"):
            continue
        line_number = index + 1

        if "rollbackFor" not in line:
            issues.append(_issue(
                "transaction rollback",
                "@Transactional does not declare rollbackFor; checked exceptions will commit",
                str(path),
                Severity.MINOR,
                line_number,
                "Add rollbackFor = Exception.class",
                "transaction-rollback",
            ))

        if "propagation" not in line:
            issues.append(_issue(
                "transaction propagation",
                "@Transactional relies on the default propagation",
                str(path),
                Severity.INFO,
                line_number,
                "State the propagation explicitly when it matters",
                "transaction-propagation",
            ))

        method = _annotated_method(lines, index)
        if method is None:
            continue
        position, name = method

        if QUERY_METHOD.match(name) and "readOnly" not in line:
            issues.append(_issue(
                "read-only transaction",
                f"Query method {name} runs in a read-write transaction",
                str(path),
                Severity.MINOR,
                line_number,
                "Use @Transactional(readOnly = true)",
                "readonly-transaction",
            ))

        end = next(
            (other for other in range(position + 1, len(lines)) if lines[other].strip().startswith("public")),
            len(lines),
        )
        if end - position > LARGE_TRANSACTION_LINES:
            issues.append(_issue(
                "large transaction",
                f"Transactional method {name} spans about {end - position} lines",
                str(path),
                Severity.MAJOR,
                line_number,
                "Keep transactions short; move non-transactional work outside",
                "large-transaction",
            ))
    return issues


class TransactionChecker(LineChecker):
    category = Category.TRANSACTION
    heuristics = (check_transactions,)
