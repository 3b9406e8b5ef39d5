"""REST API design conventions."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker, match_method

_issue = partial(make_issue, Category.API_DESIGN)

MAPPING_ANNOTATION = re.compile(r"@(?:Request|Get|Post|Put|Delete|Patch)Mapping\b")
MAPPING_PATH = re.compile(r"@\w+Mapping\s*\(\s*(?:(?:value|path)\s*=\s*)?\{?\s*\"([^\"]+)\"")
PATH_VARIABLE = re.compile(r"\{[^}]*\}")
UNIFORM_RETURN_TYPES = ("ResponseEntity", "Result")


def check_api_design(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    rest_controller = "@RestController" in content

    for index, raw in enumerate(lines):
        line = raw.strip()
        line_number = index + 1

        if MAPPING_ANNOTATION.search(line):
            match = MAPPING_PATH.search(line)
            if match:
                url = PATH_VARIABLE.sub("", match.group(1))
                if "_" in url or re.search(r"[A-Z]", url):
                    issues.append(_issue(
                        "URL naming",
                        f"URL path {match.group(1)} should use lowercase words separated by hyphens",
                        str(path),
                        Severity.MINOR,
                        line_number,
                        "Use kebab-case paths, for example /user-profile",
                        "url-naming",
                    ))
            if "@RequestMapping" in line and "method" not in line:
                if _maps_method(lines, index):
                    issues.append(_issue(
                        "HTTP method not specified",
                        "@RequestMapping on a handler method should state the HTTP method",
                        str(path),
                        Severity.MINOR,
                        line_number,
                        "Use @GetMapping, @PostMapping, etc. or set the method attribute",
                        "http-method",
                    ))

        if ("@RequestBody" in line or "@RequestParam" in line) and "@Valid" not in line and "@Validated" not in line:
            issues.append(_issue(
                "missing parameter validation",
                "API parameter has no validation annotation",
                str(path),
                Severity.MAJOR,
                line_number,
                "Add @Valid or @Validated to the parameter",
                "parameter-validation",
            ))

        if rest_controller and line.startswith("public") and "(" in line:
            method = match_method(line)
            if method and not method[1] and not any(kind in line for kind in UNIFORM_RETURN_TYPES):
                issues.append(_issue(
                    "non-uniform return type",
                    f"API method {method[0]} does not return a uniform response type",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Return ResponseEntity or a shared Result wrapper",
                    "return-type",
                ))
    return issues


def _maps_method(lines: List[str], index: int) -> bool:
    """True when the mapping annotation decorates a method rather than a class."""

    for position in range(index, min(index + 4, len(lines))):
        text = lines[position].strip()
        if re.search(r"\b(?:class|interface)\b", text):
            return False
        if position > index and match_method(text):
            return True
        if position == index and match_method(MAPPING_ANNOTATION.sub("", text, count=1).lstrip("( )")):
            return True
    return False


class ApiDesignChecker(LineChecker):
    category = Category.API_DESIGN
    heuristics = (check_api_design,)
