"""Thread safety of singleton-scoped Spring beans and shared formatters."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker, is_comment

_issue = partial(make_issue, Category.THREAD_SAFETY)

SINGLETON_BEAN_MARKERS = ("@Controller", "@RestController", "@Service")
INJECTION_ANNOTATIONS = ("@Autowired", "@Resource", "@Inject", "@Value")
MUTABLE_FIELD = re.compile(r"^private\s+(?!.*\b(?:static|final)\b)[^(=]*?\w+\s*(?:=.*)?;")


def _previous_code_line(lines: List[str], index: int) -> str:
    for position in range(index - 1, -1, -1):
        text = lines[position].strip()
        if text:
            return text
    return ""


def check_shared_state(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    singleton_bean = any(marker in content for marker in SINGLETON_BEAN_MARKERS)

    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line or is_comment(line) or line.startswith("import"):
            continue
        line_number = index + 1

        if singleton_bean and MUTABLE_FIELD.match(line):
            injected = any(annotation in line for annotation in INJECTION_ANNOTATIONS) or any(
                annotation in _previous_code_line(lines, index) for annotation in INJECTION_ANNOTATIONS
            )
            if not injected:
                issues.append(_issue(
                    "mutable bean field",
                    "Mutable instance field in a singleton controller or service",
                    str(path),
                    Severity.MAJOR,
                    line_number,
                    "Keep controllers and services stateless; use local variables or make the field final",
                    "instance-variable",
                ))

        if "SimpleDateFormat" in line and "ThreadLocal" not in line:
            issues.append(_issue(
                "SimpleDateFormat",
                "SimpleDateFormat is not thread-safe",
                str(path),
                Severity.MAJOR,
                line_number,
                "Use DateTimeFormatter or a ThreadLocal<SimpleDateFormat>",
                "simpledateformat",
            ))

        if re.search(r"(?<!Concurrent)HashMap\b", line):
            issues.append(_issue(
                "HashMap shared across threads",
                "HashMap is not safe for concurrent access",
                str(path),
                Severity.MINOR,
                line_number,
                "Use ConcurrentHashMap when the map is shared between threads",
                "hashmap-thread",
            ))
    return issues


class ThreadSafetyChecker(LineChecker):
    category = Category.THREAD_SAFETY
    heuristics = (check_shared_state,)
