"""Project descriptor probe."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from codereview.errors import ProjectNotFoundError
from codereview.result import ProjectInfo

from .code import glob_files
from .fileio import read_text_file

MAVEN_DESCRIPTORS = ("pom.xml",)
GRADLE_DESCRIPTORS = ("build.gradle", "build.gradle.kts")
DEFAULT_JAVA_VERSION = "11"

SOURCE_IGNORE = ("**/target/**", "**/build/**", "**/node_modules/**", "**/.git/**")

MAVEN_JAVA_VERSION = re.compile(
    r"<(?:java\.version|maven\.compiler\.(?:source|release))>\s*([\w.]+)\s*</"
)
GRADLE_JAVA_VERSION = re.compile(
    r"(?:sourceCompatibility\s*=\s*['\"]?(?:JavaVersion\.VERSION_)?([\d_.]+)|languageVersion\s*=\s*JavaLanguageVersion\.of\((\d+)\))"
)
MAVEN_ARTIFACT = re.compile(r"<artifactId>\s*([^<\s]+)\s*</artifactId>")
GRADLE_COORDINATE = re.compile(
    r"^\s*(?:implementation|api|compile|compileOnly|runtimeOnly|testImplementation|annotationProcessor)\s*\(?\s*['\"]([^'\":]+:[^'\":]+)(?::[^'\"]*)?['\"]"
)


def find_descriptor(root: Path) -> Optional[Tuple[str, Path]]:
    """Return the project type and build descriptor found at ``root``."""

    for name in MAVEN_DESCRIPTORS:
        if (root / name).is_file():
            return "maven", root / name
    for name in GRADLE_DESCRIPTORS:
        if (root / name).is_file():
            return "gradle", root / name
    return None


def _java_version(project_type: str, descriptor_text: str) -> str:
    pattern = MAVEN_JAVA_VERSION if project_type == "maven" else GRADLE_JAVA_VERSION
    match = pattern.search(descriptor_text)
    if not match:
        return DEFAULT_JAVA_VERSION
    version = next(group for group in match.groups() if group)
    version = version.replace("_", ".")
    return version[2:] if version.startswith("1.") else version


def _dependencies(project_type: str, descriptor_text: str) -> List[str]:
    if project_type == "maven":
        section = descriptor_text.split("<dependencies>", 1)
        body = section[1] if len(section) > 1 else ""
        return MAVEN_ARTIFACT.findall(body)
    found: List[str] = []
    for line in descriptor_text.split("\n"):
        match = GRADLE_COORDINATE.match(line)
        if match:
            found.append(match.group(1).split(":")[1])
    return found


def probe_project(root: Path) -> ProjectInfo:
    """Build a ``ProjectInfo`` snapshot; raise if no build descriptor exists."""

    root = Path(root)
    descriptor = find_descriptor(root)
    if descriptor is None:
        raise ProjectNotFoundError(
            f"No Maven or Gradle build file (pom.xml / build.gradle) found in {root}"
        )
    project_type, descriptor_path = descriptor
    text = read_text_file(descriptor_path)

    def relative(paths: List[Path]) -> Tuple[str, ...]:
        return tuple(path.relative_to(root).as_posix() for path in paths)

    return ProjectInfo(
        project_type=project_type,
        java_version=_java_version(project_type, text),
        dependencies=tuple(_dependencies(project_type, text)),
        source_files=relative(glob_files(root, "**/*.java", SOURCE_IGNORE)),
        test_files=relative(glob_files(root, "**/test/**/*.java", SOURCE_IGNORE)),
        config_files=relative(glob_files(root, "**/application*.{yml,yaml,properties}", SOURCE_IGNORE)),
    )
