"""Configuration and deployment settings: credentials, debug flags, hosts."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker, is_comment

_issue = partial(make_issue, Category.CONFIGURATION)

CONFIG_EXTENSIONS = (".properties", ".yml", ".yaml")
CONFIG_PASSWORD = re.compile(r"password\s*[:=]\s*[\"']?([^\"'\s#]+)", re.IGNORECASE)
JAVA_PASSWORD = re.compile(r"password\w*\s*=\s*\"([^\"]+)\"", re.IGNORECASE)
DEBUG_ENABLED = re.compile(r"\bdebug\b[\"']?\s*[:=]\s*[\"']?true\b", re.IGNORECASE)
LOCAL_JDBC_URL = re.compile(r"jdbc:\S*(?:localhost|127\.0\.0\.1)")


def _is_placeholder(value: str) -> bool:
    return value.startswith("${") or value.startswith("ENC(")


def check_configuration(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    is_java = path.name.endswith(".java")
    password_pattern = JAVA_PASSWORD if is_java else CONFIG_PASSWORD

    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line or is_comment(line) or line.startswith("#"):
            continue
        line_number = index + 1

        match = password_pattern.search(line)
        if match and not _is_placeholder(match.group(1)):
            issues.append(_issue(
                "hard-coded password",
                "Password stored in plain text",
                str(path),
                Severity.CRITICAL,
                line_number,
                "Read credentials from environment variables or a secret store",
                "hardcoded-password",
            ))

        if DEBUG_ENABLED.search(line):
            issues.append(_issue(
                "debug mode",
                "Debug mode enabled",
                str(path),
                Severity.MINOR,
                line_number,
                "Disable debug mode in production",
                "debug-mode",
            ))

        if LOCAL_JDBC_URL.search(line):
            issues.append(_issue(
                "local database URL",
                "Database URL points at localhost",
                str(path),
                Severity.MINOR,
                line_number,
                "Configure the database URL through environment variables",
                "db-config",
            ))
    return issues


class ConfigurationChecker(LineChecker):
    category = Category.CONFIGURATION
    extensions = (".java",) + CONFIG_EXTENSIONS
    heuristics = (check_configuration,)
