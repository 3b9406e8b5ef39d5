"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

import yaml


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text, or an empty string if missing."""

    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_source(path: Path) -> Tuple[str, List[str]]:
    """Read a source file into its full text and its lines.

    Raises ``OSError`` or ``UnicodeDecodeError``; callers decide whether a
    failure is fatal.
    """

    content = Path(path).read_text(encoding="utf-8")
    return content, content.split("\n")
