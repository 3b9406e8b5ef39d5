"""Environment handling: variables, profiles and reproducible dependency versions."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker, is_comment

_issue = partial(make_issue, Category.ENVIRONMENT)

CONFIG_EXTENSIONS = (".properties", ".yml", ".yaml")
BUILD_FILES = ("pom.xml",)
BUILD_EXTENSIONS = (".gradle", ".gradle.kts")

ENV_LOOKUP = re.compile(r"\bSystem\s*\.\s*(getenv|getProperty)\s*\(([^()]*)\)")
PROD_PROFILE = re.compile(r"(?:spring\.profiles\.active|active)\s*[:=]\s*[\"']?[\w,]*\bprod(?:uction)?\b")
MAVEN_DYNAMIC_VERSION = re.compile(r"<version>\s*(RELEASE|LATEST|[\[(][^<]*[\])])\s*</version>")
GRADLE_DYNAMIC_VERSION = re.compile(r"[\"'][\w.\-]+:[\w.\-]+:([\w.\-]*\+|latest\.\w+)[\"']")


def check_environment(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    name = path.name
    is_java = name.endswith(".java")
    is_config = name.endswith(CONFIG_EXTENSIONS)
    is_build = name in BUILD_FILES or name.endswith(BUILD_EXTENSIONS)

    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line or is_comment(line):
            continue
        line_number = index + 1

        if is_java:
            for match in ENV_LOOKUP.finditer(line):
                if "," in match.group(2):
                    continue
                if "Optional" in line or "orElse" in line or "!= null" in line or "?" in line:
                    continue
                issues.append(_issue(
                    "missing default",
                    f"System.{match.group(1)}() used without a default value",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Provide a default value or fail fast with a clear message",
                    "env-default",
                ))

        if is_config and not line.startswith("#") and PROD_PROFILE.search(line):
            issues.append(_issue(
                "production profile",
                "Production profile activated in a shared configuration file",
                str(path),
                Severity.INFO,
                line_number,
                "Select the profile at deploy time with SPRING_PROFILES_ACTIVE",
                "prod-config",
            ))

        if is_build:
            match = MAVEN_DYNAMIC_VERSION.search(line) or GRADLE_DYNAMIC_VERSION.search(line)
            if match:
                issues.append(_issue(
                    "dynamic dependency version",
                    f"Dependency version {match.group(1)} is not pinned",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Pin an exact version so builds are reproducible",
                    "dependency-version",
                ))
    return issues


class EnvironmentChecker(LineChecker):
    category = Category.ENVIRONMENT
    extensions = (".java",) + CONFIG_EXTENSIONS + BUILD_EXTENSIONS
    filenames = BUILD_FILES
    heuristics = (check_environment,)
