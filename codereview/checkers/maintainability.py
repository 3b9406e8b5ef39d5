"""Maintainability: method length, magic numbers, TODOs and comment density."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List, Optional

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LONG_METHOD_LINES, MIN_COMMENT_RATIO, LineChecker, code_only, is_comment, match_method, strip_literals

_issue = partial(make_issue, Category.MAINTAINABILITY)

MAGIC_NUMBER = re.compile(r"(?<![\w.])\d{2,}(?![\w.])")
TODO_MARKER = re.compile(r"\b(?:TODO|FIXME)\b")


def _method_end(code: List[str], start: int) -> Optional[int]:
    depth = 0
    opened = False
    for index in range(start, len(code)):
        line = code[index]
        depth += line.count("{") - line.count("}")
        opened = opened or "{" in line
        if opened and depth <= 0:
            return index
        if not opened and line.endswith(";"):
            return None
    return None


def check_method_length(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    code = code_only(lines)
    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line.startswith("public"):
            continue
        declared = match_method(line)
        if not declared:
            continue
        end = _method_end(code, index)
        if end is None:
            continue
        body = end - index - 1
        if body > LONG_METHOD_LINES:
            issues.append(_issue(
                "long method",
                f"Method {declared[0]} body is {body} lines long",
                str(path),
                Severity.MINOR,
                index + 1,
                "Split long methods into smaller ones",
                "long-method",
            ))
    return issues


def check_code_hygiene(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    comment_lines = code_lines = 0

    for index, raw in enumerate(lines):
        line = raw.strip()
        line_number = index + 1

        if is_comment(line):
            comment_lines += 1
        elif line and not line.startswith(("import", "package")):
            code_lines += 1

        if TODO_MARKER.search(line):
            issues.append(_issue(
                "TODO comment",
                "Unfinished TODO or FIXME item",
                str(path),
                Severity.INFO,
                line_number,
                "Resolve TODO and FIXME comments or track them as tickets",
                "todo-comment",
            ))

        if not line or is_comment(line) or line.startswith("@"):
            continue
        code = strip_literals(line)
        if re.search(r"\b(?:final|static)\b", code) or code.lstrip().startswith("case "):
            continue
        if MAGIC_NUMBER.search(code):
            issues.append(_issue(
                "magic number",
                "Unnamed numeric literal in code",
                str(path),
                Severity.MINOR,
                line_number,
                "Extract the number into a named constant",
                "magic-number",
            ))

    if code_lines and comment_lines / code_lines < MIN_COMMENT_RATIO:
        issues.append(_issue(
            "insufficient comments",
            f"Only {comment_lines} comment lines for {code_lines} lines of code",
            str(path),
            Severity.MINOR,
            None,
            "Document the non-obvious parts of the code",
            "insufficient-comments",
        ))
    return issues


class MaintainabilityChecker(LineChecker):
    category = Category.MAINTAINABILITY
    heuristics = (check_method_length, check_code_hygiene)
