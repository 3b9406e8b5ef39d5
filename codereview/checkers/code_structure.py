"""Code structure and quality: duplication, naming, complexity, design patterns."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import Dict, List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import (
    DUPLICATE_MIN_CHARS,
    DUPLICATE_WINDOW,
    MAX_COMPLEXITY,
    MAX_METHOD_LINES,
    MODIFIERS,
    NOT_A_TYPE,
    LineChecker,
    code_only,
    is_comment,
    match_method,
    strip_literals,
)

_issue = partial(make_issue, Category.CODE_STRUCTURE)

TRIVIAL_LINE = re.compile(r"[{}();,\s]*")
CLASS_DECLARATION = re.compile(r"\b(?:class|interface|enum|record)\s+([A-Za-z_$][\w$]*)")
CONSTANT_DECLARATION = re.compile(
    r"\b(?:static\s+final|final\s+static)\s+[\w.$<>,?\[\]\s]+?\s+([A-Za-z_$][\w$]*)\s*[=;]"
)
VARIABLE_DECLARATION = re.compile(
    r"^(?:(?:private|protected|public|static|final|volatile|transient)\s+)*"
    r"([\w.$]+(?:<[\w\s,?.<>\[\]]*>)?(?:\[\])*)\s+([A-Za-z_$][\w$]*)\s*(?:=|;)"
)
DECISION_KEYWORDS = re.compile(r"\b(?:if|for|while|case|catch)\b|\bdefault\s*:")

PASCAL_CASE = re.compile(r"[A-Z][a-zA-Z0-9]*")
CAMEL_CASE = re.compile(r"[a-z][a-zA-Z0-9]*")
PREFIXED_VARIABLE = re.compile(r"[ms]_[A-Za-z][A-Za-z0-9]*")
UPPER_SNAKE_CASE = re.compile(r"[A-Z][A-Z0-9_]*")
NAMING_EXEMPT = frozenset({"serialVersionUID"})


def _is_substantive(line: str) -> bool:
    return bool(line) and not is_comment(line) and not TRIVIAL_LINE.fullmatch(line)


def check_duplicate_code(path: Path, content: str, lines: List[str]) -> List[Issue]:
    """Report every 3-line block of real code that occurs more than once."""

    stripped = [line.strip() for line in lines]
    blocks: Dict[str, List[int]] = {}
    for index in range(len(stripped) - DUPLICATE_WINDOW + 1):
        block_lines = stripped[index:index + DUPLICATE_WINDOW]
        if not all(_is_substantive(line) for line in block_lines):
            continue
        block = "\n".join(block_lines)
        if len(block) <= DUPLICATE_MIN_CHARS:
            continue
        blocks.setdefault(block, []).append(index + 1)

    issues: List[Issue] = []
    for starts in blocks.values():
        if len(starts) < 2:
            continue
        issues.append(_issue(
            "duplicate code",
            f"Duplicate code block found at lines {', '.join(str(start) for start in starts)}",
            str(path),
            Severity.MAJOR,
            starts[0],
            "Extract the repeated code into a shared method",
            "duplicate-code",
        ))
    return issues


def check_naming_conventions(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line or is_comment(line):
            continue
        code = strip_literals(line).strip()
        line_number = index + 1

        class_match = CLASS_DECLARATION.search(code)
        if class_match:
            if not PASCAL_CASE.fullmatch(class_match.group(1)):
                issues.append(_issue(
                    "class naming",
                    f"Class name {class_match.group(1)} does not follow PascalCase",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Name classes in PascalCase, for example UserService",
                    "class-naming",
                ))
            continue

        method = match_method(code)
        if method:
            name, is_constructor = method
            if not is_constructor and not CAMEL_CASE.fullmatch(name):
                issues.append(_issue(
                    "method naming",
                    f"Method name {name} does not follow camelCase",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Name methods in camelCase, for example getUserById",
                    "method-naming",
                ))
            continue

        constant_match = CONSTANT_DECLARATION.search(code)
        if constant_match:
            name = constant_match.group(1)
            if name not in NAMING_EXEMPT and not UPPER_SNAKE_CASE.fullmatch(name):
                issues.append(_issue(
                    "constant naming",
                    f"Constant {name} does not follow UPPER_SNAKE_CASE",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Name constants in UPPER_SNAKE_CASE, for example MAX_RETRY_COUNT",
                    "constant-naming",
                ))
            continue

        variable_match = VARIABLE_DECLARATION.match(code)
        if variable_match:
            type_name, name = variable_match.groups()
            if type_name in NOT_A_TYPE or type_name in MODIFIERS:
                continue
            if not (CAMEL_CASE.fullmatch(name) or PREFIXED_VARIABLE.fullmatch(name)):
                issues.append(_issue(
                    "variable naming",
                    f"Variable name {name} does not follow camelCase",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Name variables in camelCase, for example userId",
                    "variable-naming",
                ))
    return issues


def _decision_points(code: str) -> int:
    return len(DECISION_KEYWORDS.findall(code)) + code.count("&&") + code.count("||")


def check_method_complexity(path: Path, content: str, lines: List[str]) -> List[Issue]:
    """Two-state scan: outside a method, or inside one tracking brace depth.

    A signature not terminated by ``;`` opens a method; the method closes
    when the brace depth returns to zero after its body opened.
    """

    issues: List[Issue] = []
    in_method = False
    name = ""
    start = depth = complexity = 0
    opened = False

    for index, code in enumerate(code_only(lines)):
        if not in_method:
            declared = match_method(code)
            if not declared or code.endswith(";"):
                continue
            in_method = True
            name = declared[0]
            start = index
            depth = 0
            complexity = 1
            opened = False
        elif not opened and code.endswith(";") and "{" not in code:
            # wrapped statement, not a declaration
            in_method = False
            continue

        depth += code.count("{") - code.count("}")
        opened = opened or "{" in code
        complexity += _decision_points(code)

        if not opened or depth > 0:
            continue
        in_method = False
        length = index - start
        if complexity > MAX_COMPLEXITY:
            issues.append(_issue(
                "method complexity",
                f"Method {name} has cyclomatic complexity {complexity}, above the limit of {MAX_COMPLEXITY}",
                str(path),
                Severity.MAJOR,
                start + 1,
                "Split the method into smaller methods",
                "method-complexity",
            ))
        if length > MAX_METHOD_LINES:
            issues.append(_issue(
                "method too long",
                f"Method {name} spans {length} lines, above the limit of {MAX_METHOD_LINES}",
                str(path),
                Severity.MINOR,
                start + 1,
                "Split the method into smaller methods",
                "method-length",
            ))
    return issues


def check_design_patterns(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    name = path.name

    if "private static" in content and "getInstance()" in content:
        if "synchronized" not in content and "volatile" not in content:
            issues.append(_issue(
                "singleton pattern",
                "Singleton implementation may not be thread-safe",
                str(path),
                Severity.MINOR,
                None,
                "Use double-checked locking with a volatile field, a holder class, or an enum singleton",
                "singleton-pattern",
            ))

    if "Factory" in name and "new " in content:
        factory_method = re.compile(r"\b(?:create|build|get|make|new[A-Z])\w*\s*\(")
        if not any(match_method(line.strip()) and factory_method.search(line) for line in lines):
            issues.append(_issue(
                "factory pattern",
                "Class is named as a factory but exposes no factory method",
                str(path),
                Severity.INFO,
                None,
                "Provide creation methods such as create() or build()",
                "factory-pattern",
            ))

    if "Builder" in name and "build()" not in content:
        issues.append(_issue(
            "builder pattern",
            "Class is named as a builder but has no build() method",
            str(path),
            Severity.INFO,
            None,
            "Add a build() method returning the constructed object",
            "builder-pattern",
        ))
    return issues


class CodeStructureChecker(LineChecker):
    category = Category.CODE_STRUCTURE
    heuristics = (
        check_duplicate_code,
        check_naming_conventions,
        check_design_patterns,
        check_method_complexity,
    )
