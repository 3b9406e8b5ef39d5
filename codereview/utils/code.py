"""Source file discovery with glob-style include and ignore patterns."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternation into plain glob patterns."""

    start = pattern.find("{")
    if start < 0:
        return [pattern]
    depth = 0
    last = start + 1
    options: List[str] = []
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "," and depth == 1:
            options.append(pattern[last:index])
            last = index + 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[last:index])
                head, tail = pattern[:start], pattern[index + 1:]
                return [expanded for option in options for expanded in expand_braces(head + option + tail)]
    # unbalanced brace stays literal
    return [pattern]


@lru_cache(maxsize=128)
def _segments(pattern: str) -> Tuple[Tuple[str, ...], ...]:
    return tuple(tuple(alternative.split("/")) for alternative in expand_braces(pattern))


def _match_segments(parts: Sequence[str], segments: Sequence[str]) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        return any(_match_segments(parts[skip:], rest) for skip in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


def glob_match(relative: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob.

    ``*`` and ``?`` stay within one path segment, ``**`` spans any number
    of directories (including none) and ``{a,b}`` expands to alternatives.
    """

    parts = relative.split("/")
    return any(_match_segments(parts, segments) for segments in _segments(pattern))


def matches_any(relative: str, patterns: Iterable[str]) -> bool:
    return any(glob_match(relative, pattern) for pattern in patterns)


def glob_files(root: Path, pattern: str, ignore: Sequence[str] = ()) -> List[Path]:
    """Return files under ``root`` matching ``pattern`` and none of ``ignore``.

    Results are sorted by relative path. Directories matching an ignore
    pattern are not descended into.
    """

    root = Path(root)
    found: List[Path] = []
    for current, dirnames, filenames in os.walk(root):
        rel_dir = Path(current).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"
        dirnames[:] = sorted(
            name for name in dirnames if not matches_any(f"{prefix}{name}/", ignore)
        )
        for name in sorted(filenames):
            relative = f"{prefix}{name}"
            if glob_match(relative, pattern) and not matches_any(relative, ignore):
                found.append(root / relative)
    return sorted(found, key=lambda path: path.relative_to(root).as_posix())


def discover_files(root: Path, include: Sequence[str], exclude: Sequence[str] = ()) -> List[Path]:
    """Resolve include patterns minus exclude patterns, deduplicated in pattern order."""

    seen = set()
    files: List[Path] = []
    for pattern in include:
        for path in glob_files(root, pattern, exclude):
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files
