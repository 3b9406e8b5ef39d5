"""Project-level review configuration loaded from ``.code-review.yml``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Tuple

import yaml

from .errors import ParameterError
from .result import Category
from .utils import read_yaml_file

CONFIG_FILENAME = ".code-review.yml"

DEFAULT_INCLUDE_PATTERNS: Tuple[str, ...] = (
    "**/*.java",
    "**/*.jsp",
    "**/application*.{properties,yml,yaml}",
    "**/pom.xml",
    "**/*.gradle",
    "**/*.gradle.kts",
)
DEFAULT_EXCLUDE_PATTERNS: Tuple[str, ...] = (
    "**/target/**",
    "**/build/**",
    "**/out/**",
    "**/node_modules/**",
    "**/.git/**",
    "**/.gradle/**",
    "**/.idea/**",
)


@dataclass(frozen=True)
class ReviewConfig:
    """Defaults a project can override for every scan of its tree."""

    include_patterns: Tuple[str, ...] = DEFAULT_INCLUDE_PATTERNS
    exclude_patterns: Tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    categories: Tuple[Category, ...] = tuple(Category)
    disabled_rules: FrozenSet[str] = field(default_factory=frozenset)
    log_level: Optional[str] = None


def parse_categories(values: Any, source: str = "categories") -> Tuple[Category, ...]:
    """Convert category names to ``Category`` members, rejecting unknown names."""

    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)):
        raise ParameterError(f"{source} must be a list of category names")
    if not values:
        raise ParameterError(f"{source} must contain at least one category")
    allowed = ", ".join(category.value for category in Category)
    parsed: List[Category] = []
    for value in values:
        try:
            category = value if isinstance(value, Category) else Category(str(value).strip().lower())
        except ValueError as exc:
            raise ParameterError(f"unknown category {value!r} in {source}; expected one of: {allowed}") from exc
        if category not in parsed:
            parsed.append(category)
    return tuple(parsed)


def _string_list(data: dict, key: str, source: Path) -> Optional[Tuple[str, ...]]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ParameterError(f"{source}: '{key}' must be a list of strings")
    return tuple(value)


def load_config(path: Path) -> ReviewConfig:
    """Load configuration from a YAML file; a missing file yields defaults."""

    try:
        data = read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise ParameterError(f"{path}: invalid YAML ({exc})") from exc
    if data is None:
        return ReviewConfig()
    if not isinstance(data, dict):
        raise ParameterError(f"{path}: configuration must be a mapping")

    include = _string_list(data, "include", path)
    exclude = _string_list(data, "exclude", path)
    disabled = _string_list(data, "disabled_rules", path) or ()
    raw_categories = data.get("categories")
    categories = parse_categories(raw_categories, f"{path}: categories") if raw_categories is not None else tuple(Category)
    log_level = data.get("log_level")

    return ReviewConfig(
        include_patterns=include or DEFAULT_INCLUDE_PATTERNS,
        exclude_patterns=exclude if exclude is not None else DEFAULT_EXCLUDE_PATTERNS,
        categories=categories,
        disabled_rules=frozenset(disabled),
        log_level=str(log_level) if log_level else None,
    )


def load_project_config(root_path: Path) -> ReviewConfig:
    return load_config(Path(root_path) / CONFIG_FILENAME)
