"""Security: SQL injection, XSS, missing authorization and input validation."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import (
    PARAM_CHECK_WINDOW,
    STATEMENT_WINDOW,
    XSS_RETURN_WINDOW,
    LineChecker,
    is_comment,
    is_controller,
    window,
)

_issue = partial(make_issue, Category.SECURITY)

EXECUTE_CALLS = ("executeQuery(", "executeUpdate(", "execute(")
ESCAPE_UTILITIES = ("HtmlUtils.htmlEscape", "StringEscapeUtils", "encodeForHTML", "escapeHtml", "fn:escapeXml", "<c:out")
TEMPLATE_EXTENSIONS = (".jsp", ".jspx")
TEMPLATE_PARAMETER = ("${param.", "<%=request.getParameter", "<%= request.getParameter")

REQUEST_PARAMETER = re.compile(
    r"@(?:RequestParam|PathVariable)(?:\([^)]*\))?\s+(?:final\s+)?[\w.<>\[\]]+\s+(\w+)"
)
MUTATING_ENDPOINTS = ("@PostMapping", "@PutMapping", "@DeleteMapping", "@PatchMapping")
SECURITY_MARKERS = (
    "@PreAuthorize", "@PostAuthorize", "@Secured", "@RolesAllowed",
    "hasRole", "hasPermission", "SecurityContextHolder",
)
PRINCIPAL_MARKERS = ("Authentication", "Principal")
HARDCODED_ROLE = re.compile(r'"(?:ROLE_\w*|ADMIN|USER)"')
ROLE_CHECKS = ("hasRole", "hasAuthority", "hasAnyRole", "isUserInRole")
VALIDATION_ANNOTATIONS = ("@Valid", "@Validated", "@NotNull", "@NotEmpty", "@NotBlank")
INLINE_PARAM_CHECK = re.compile(r"\bif\b.*(?:null|isEmpty|isBlank|hasText)")
DTO_SUFFIXES = ("DTO.java", "Dto.java", "Request.java", "Form.java")


def check_sql_injection(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        if is_comment(line):
            continue
        line_number = index + 1

        if any(call in line for call in EXECUTE_CALLS) and "+" in line and '"' in line:
            issues.append(_issue(
                "SQL injection risk",
                "SQL statement built by string concatenation",
                str(path),
                Severity.CRITICAL,
                line_number,
                "Use PreparedStatement with bound parameters instead of concatenation",
                "sql-injection",
            ))

        if re.search(r"\bStatement\b", line) and "Prepared" not in line:
            following = " ".join(text for _, text in window(lines, index, index + STATEMENT_WINDOW))
            if "executeQuery" in following or "executeUpdate" in following or "execute(" in following:
                issues.append(_issue(
                    "SQL injection risk",
                    "Plain Statement used to execute SQL",
                    str(path),
                    Severity.MAJOR,
                    line_number,
                    "Use PreparedStatement instead of Statement",
                    "statement-execution",
                ))
    return issues


def check_xss_protection(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []

    if path.name.endswith(".java") and is_controller(path, content):
        for index, raw in enumerate(lines):
            line = raw.strip()
            if "@RequestParam" not in line and "@PathVariable" not in line:
                continue
            match = REQUEST_PARAMETER.search(line)
            returned = re.compile(rf"\b{re.escape(match.group(1))}\b") if match else None
            for _, following in window(lines, index + 1, index + XSS_RETURN_WINDOW):
                if not following.startswith("return"):
                    continue
                if "escape" in following.lower():
                    break
                if returned is None or returned.search(following):
                    issues.append(_issue(
                        "XSS risk",
                        "Request parameter returned to the client without escaping",
                        str(path),
                        Severity.MAJOR,
                        index + 1,
                        "Escape user input with HtmlUtils.htmlEscape() or an encoder library",
                        "xss-protection",
                    ))
                    break

    if path.name.endswith(TEMPLATE_EXTENSIONS) and not any(util in content for util in ESCAPE_UTILITIES):
        for index, raw in enumerate(lines):
            if any(marker in raw for marker in TEMPLATE_PARAMETER):
                issues.append(_issue(
                    "JSP XSS risk",
                    "Request parameter written into the page without escaping",
                    str(path),
                    Severity.CRITICAL,
                    index + 1,
                    "Escape output with the JSTL c:out tag or fn:escapeXml()",
                    "jsp-xss",
                ))
    return issues


def check_permission_validation(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    if not path.name.endswith(".java"):
        return issues

    secured = any(marker in content for marker in SECURITY_MARKERS) or any(
        marker in content for marker in PRINCIPAL_MARKERS
    )
    if is_controller(path, content) and not secured:
        for index, raw in enumerate(lines):
            if any(endpoint in raw for endpoint in MUTATING_ENDPOINTS):
                issues.append(_issue(
                    "missing authorization",
                    "State-changing endpoint has no authorization check",
                    str(path),
                    Severity.MAJOR,
                    index + 1,
                    "Add @PreAuthorize or check the caller's permissions in the method",
                    "permission-validation",
                ))

    for index, raw in enumerate(lines):
        if HARDCODED_ROLE.search(raw) and any(check in raw for check in ROLE_CHECKS):
            issues.append(_issue(
                "hard-coded role",
                "Role or authority name hard-coded in an access check",
                str(path),
                Severity.MINOR,
                index + 1,
                "Define roles and authorities as constants or an enum",
                "hardcoded-roles",
            ))
    return issues


def check_input_validation(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    if not path.name.endswith(".java"):
        return issues
    validated = any(annotation in content for annotation in VALIDATION_ANNOTATIONS)

    if is_controller(path, content) and not validated:
        for index, raw in enumerate(lines):
            line = raw.strip()
            line_number = index + 1

            if "@RequestBody" in line:
                issues.append(_issue(
                    "missing input validation",
                    "Request body accepted without validation",
                    str(path),
                    Severity.MAJOR,
                    line_number,
                    "Annotate the body with @Valid or @Validated",
                    "input-validation",
                ))

            if "@RequestParam" in line and "required = false" not in line and "defaultValue" not in line:
                following = window(lines, index + 1, index + PARAM_CHECK_WINDOW)
                if not any(INLINE_PARAM_CHECK.search(text) for _, text in following):
                    issues.append(_issue(
                        "missing parameter validation",
                        "Request parameter used without validation",
                        str(path),
                        Severity.MINOR,
                        line_number,
                        "Validate the parameter or use Bean Validation constraints",
                        "param-validation",
                    ))

    if path.name.endswith(DTO_SUFFIXES) and not validated:
        issues.append(_issue(
            "missing validation annotations",
            "Request/DTO class declares no Bean Validation constraints",
            str(path),
            Severity.MINOR,
            None,
            "Add constraints such as @NotNull or @NotBlank",
            "dto-validation",
        ))
    return issues


class SecurityChecker(LineChecker):
    category = Category.SECURITY
    extensions = (".java",) + TEMPLATE_EXTENSIONS
    heuristics = (
        check_sql_injection,
        check_xss_protection,
        check_permission_validation,
        check_input_validation,
    )
