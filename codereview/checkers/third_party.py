"""Third-party dependencies: unstable or vulnerable versions, duplicates, stale imports."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker

_issue = partial(make_issue, Category.THIRD_PARTY)

BUILD_EXTENSIONS = (".gradle", ".gradle.kts")

# artifactId -> (first fixed version, rule id, advisory)
KNOWN_VULNERABILITIES: Dict[str, Tuple[Tuple[int, ...], str, str]] = {
    "log4j-core": ((2, 15, 0), "log4j-vulnerability", "Log4j below 2.15.0 is affected by Log4Shell (CVE-2021-44228)"),
    "commons-collections": ((3, 2, 2), "commons-collections-vulnerability", "commons-collections below 3.2.2 allows deserialization attacks"),
    "fastjson": ((1, 2, 83), "fastjson-vulnerability", "fastjson below 1.2.83 allows remote code execution through autoType"),
    "jackson-databind": ((2, 9, 10), "jackson-databind-vulnerability", "jackson-databind below 2.9.10 has known deserialization gadgets"),
}
DYNAMIC_VERSION = re.compile(r"[+\[\](),]|^(?:LATEST|RELEASE)$|^latest\.", re.IGNORECASE)
UNSTABLE_VERSION = re.compile(r"SNAPSHOT|[.\-](?:alpha|beta|rc|M)\d*\b", re.IGNORECASE)
OUTDATED_ARTIFACTS = {"commons-lang": "commons-lang3"}

XML_TAG = re.compile(r"<(groupId|artifactId|version)>\s*([^<]+?)\s*</\1>")
GRADLE_COORDINATE = re.compile(r"[\"']([\w.\-]+):([\w.\-]+)(?::([\w.\-+]+))?[\"']")
IMPORT = re.compile(r"^import\s+(?:static\s+)?([\w.]+)\s*;")


@dataclass
class Dependency:
    group: str
    artifact: str
    version: Optional[str]
    line: int
    version_line: int


def maven_dependencies(lines: List[str]) -> List[Dependency]:
    """Collect ``<dependency>`` blocks outside ``<dependencyManagement>``."""

    found: List[Dependency] = []
    managed = False
    current: Optional[Dict[str, object]] = None
    for index, raw in enumerate(lines):
        line = raw.strip()
        if "<dependencyManagement>" in line:
            managed = True
        if "</dependencyManagement>" in line:
            managed = False
        if "<dependency>" in line and not managed:
            current = {"line": index + 1, "version_line": index + 1}
        if current is not None:
            for tag, value in XML_TAG.findall(line):
                current[tag] = value
                if tag == "version":
                    current["version_line"] = index + 1
            if "</dependency>" in line:
                if "artifactId" in current:
                    found.append(Dependency(
                        group=str(current.get("groupId", "")),
                        artifact=str(current["artifactId"]),
                        version=current.get("version"),
                        line=int(current["line"]),
                        version_line=int(current["version_line"]),
                    ))
                current = None
    return found


def gradle_dependencies(lines: List[str]) -> List[Dependency]:
    found: List[Dependency] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        if line.startswith(("//", "id ", "id(", "classpath")):
            continue
        for match in GRADLE_COORDINATE.finditer(line):
            group, artifact, version = match.groups()
            found.append(Dependency(group, artifact, version, index + 1, index + 1))
    return found


def parse_version(version: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", version)[:3])


def pinned_version(version: str) -> Optional[Tuple[int, ...]]:
    """Return major.minor.patch of a fixed version; ``None`` for dynamic or partial ones."""

    if DYNAMIC_VERSION.search(version):
        return None
    parts = parse_version(version)
    return parts if len(parts) == 3 else None


def check_dependencies(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    if path.name == "pom.xml":
        dependencies = maven_dependencies(lines)
    elif path.name.endswith(BUILD_EXTENSIONS):
        dependencies = gradle_dependencies(lines)
    else:
        return issues

    seen: Dict[Tuple[str, str], int] = {}
    for dependency in dependencies:
        version = dependency.version or ""
        resolved = bool(version) and not version.startswith("${")

        if resolved and UNSTABLE_VERSION.search(version):
            issues.append(_issue(
                "unstable dependency version",
                f"{dependency.artifact} uses pre-release version {version}",
                str(path),
                Severity.MINOR,
                dependency.version_line,
                "Use a released version in production builds",
                "snapshot-dependency",
            ))

        vulnerable = KNOWN_VULNERABILITIES.get(dependency.artifact)
        pinned = pinned_version(version) if resolved else None
        if vulnerable and pinned is not None and pinned < vulnerable[0]:
            fixed, rule_id, advisory = vulnerable
            issues.append(_issue(
                "known vulnerability",
                f"{advisory}; found {version}",
                str(path),
                Severity.CRITICAL,
                dependency.version_line,
                f"Upgrade {dependency.artifact} to {'.'.join(str(part) for part in fixed)} or later",
                rule_id,
            ))

        replacement = OUTDATED_ARTIFACTS.get(dependency.artifact)
        if replacement:
            issues.append(_issue(
                "outdated dependency",
                f"{dependency.artifact} is no longer maintained",
                str(path),
                Severity.MINOR,
                dependency.line,
                f"Migrate to {replacement}",
                "outdated-dependency",
            ))

        key = (dependency.group, dependency.artifact)
        if key in seen:
            issues.append(_issue(
                "duplicate dependency",
                f"{dependency.artifact} is declared more than once (first at line {seen[key]})",
                str(path),
                Severity.MINOR,
                dependency.line,
                "Remove the duplicate declaration",
                "duplicate-dependency",
            ))
        else:
            seen[key] = dependency.line
    return issues


def check_unused_imports(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    if not path.name.endswith(".java"):
        return issues

    body = "\n".join(line for line in lines if not line.strip().startswith(("import", "package")))
    for index, raw in enumerate(lines):
        match = IMPORT.match(raw.strip())
        if not match:
            continue
        name = match.group(1).rsplit(".", 1)[-1]
        if not re.search(rf"\b{re.escape(name)}\b", body):
            issues.append(_issue(
                "unused import",
                f"Import {match.group(1)} is never used",
                str(path),
                Severity.INFO,
                index + 1,
                "Remove the unused import",
                "unused-import",
            ))
    return issues


class ThirdPartyChecker(LineChecker):
    category = Category.THIRD_PARTY
    extensions = (".java",) + BUILD_EXTENSIONS
    filenames = ("pom.xml",)
    heuristics = (check_dependencies, check_unused_imports)
