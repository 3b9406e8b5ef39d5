"""Checker contract and the shared line-scanning machinery."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from codereview.logs import get_logger
from codereview.result import Category, Issue
from codereview.utils import read_source

# Window sizes and thresholds shared by the heuristics. Lookahead windows are
# exclusive upper bounds measured from the triggering line index.
DUPLICATE_WINDOW = 3
DUPLICATE_MIN_CHARS = 10
NESTED_LOOP_WINDOW = 5
LOOP_BODY_WINDOW = 10
CACHE_WINDOW = 3
STATEMENT_WINDOW = 5
XSS_RETURN_WINDOW = 6
PARAM_CHECK_WINDOW = 10
N_PLUS_ONE_WINDOW = 10
MAX_COMPLEXITY = 10
MAX_METHOD_LINES = 50
MAX_IN_CLAUSE = 100
LARGE_TRANSACTION_LINES = 50
LONG_METHOD_LINES = 30
MIN_COMMENT_RATIO = 0.1
MAX_POOL_SIZE = 50

Heuristic = Callable[[Path, str, List[str]], List[Issue]]


class Checker(Protocol):
    """Protocol implemented by all category checkers."""

    category: Category

    def check(self, files: Sequence[Path], root_path: Path) -> List[Issue]:
        """Scan ``files`` and return the issues found, in file then line order."""


class LineChecker:
    """Run a tuple of pure heuristics over every file the checker accepts.

    Subclasses set ``category``, ``extensions`` (and optionally
    ``filenames``) and ``heuristics``. Each call is independent: the only
    state is the logger handed in at construction.
    """

    category: Category
    extensions: Tuple[str, ...] = (".java",)
    filenames: Tuple[str, ...] = ()
    heuristics: Tuple[Heuristic, ...] = ()

    def __init__(self, logger=None) -> None:
        self._logger = logger or get_logger(type(self).__name__)

    def accepts(self, path: Path) -> bool:
        name = path.name
        return name in self.filenames or name.endswith(self.extensions)

    def check(self, files: Sequence[Path], root_path: Path) -> List[Issue]:
        issues: List[Issue] = []
        for path in files:
            path = Path(path)
            if not self.accepts(path):
                continue
            try:
                content, lines = read_source(path)
            except (OSError, UnicodeDecodeError) as exc:
                self._logger.warning("skipping unreadable file", file=str(path), error=str(exc))
                continue
            issues.extend(self.check_file(path, content, lines))
        return issues

    def check_file(self, path: Path, content: str, lines: List[str]) -> List[Issue]:
        found: List[Issue] = []
        for heuristic in self.heuristics:
            found.extend(heuristic(path, content, lines))
        return order_by_line(found)


def order_by_line(issues: List[Issue]) -> List[Issue]:
    """Stable sort by line; file-level issues (no line) go last."""

    return sorted(issues, key=lambda issue: (issue.line is None, issue.line or 0))


# ----------------------------------------------------------------------
# Text helpers
# ----------------------------------------------------------------------
STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"')
CHAR_LITERAL = re.compile(r"'(?:\\.|[^'\\])'")
LINE_COMMENT = re.compile(r"//.*$")
BLOCK_COMMENT_INLINE = re.compile(r"/\*.*?\*/")

CONTROLLER_MARKERS = ("@Controller", "@RestController")

MODIFIERS = frozenset(
    {
        "public", "private", "protected", "static", "final", "abstract",
        "synchronized", "native", "default", "transient", "volatile", "strictfp",
    }
)
NOT_A_TYPE = frozenset(
    {
        "return", "new", "throw", "throws", "else", "case", "if", "while", "for",
        "switch", "catch", "do", "try", "package", "import", "assert", "break",
        "continue", "yield", "instanceof", "class", "interface", "enum", "extends",
        "implements", "super", "this", "record",
    }
)

METHOD_DECLARATION = re.compile(
    r"^(?:@\w+(?:\([^)]*\))?\s+)*"
    r"(?:(?:public|private|protected|static|final|abstract|synchronized|native|default|strictfp)\s+)*"
    r"(?:<[\w\s,?.&<>]+>\s+)?"
    r"([\w.$]+(?:<[\w\s,?.<>\[\]]*>)?(?:\[\])*)\s+"
    r"([A-Za-z_$][\w$]*)\s*\("
)


def is_comment(line: str) -> bool:
    """True for a stripped line that is (part of) a comment."""

    return line.startswith(("//", "/*", "*"))


def strip_literals(line: str) -> str:
    """Blank out string/char literals and drop comments from one line of code."""

    code = STRING_LITERAL.sub('""', line)
    code = CHAR_LITERAL.sub("''", code)
    code = BLOCK_COMMENT_INLINE.sub(" ", code)
    return LINE_COMMENT.sub("", code)


def code_only(lines: List[str]) -> List[str]:
    """Return ``lines`` with literals and comments removed, including multi-line ``/* */`` blocks.

    The result has one entry per input line so indexes still line up.
    """

    stripped: List[str] = []
    in_comment = False
    for raw in lines:
        rest = CHAR_LITERAL.sub("''", STRING_LITERAL.sub('""', raw))
        code = ""
        while rest:
            if in_comment:
                end = rest.find("*/")
                if end < 0:
                    break
                rest = rest[end + 2:]
                in_comment = False
                continue
            start = rest.find("/*")
            line_comment = rest.find("//")
            if line_comment >= 0 and (start < 0 or line_comment < start):
                code += rest[:line_comment]
                break
            if start < 0:
                code += rest
                break
            code += rest[:start] + " "
            rest = rest[start + 2:]
            in_comment = True
        stripped.append(code.strip())
    return stripped


def string_literals(line: str) -> List[str]:
    return [literal[1:-1] for literal in STRING_LITERAL.findall(line)]


def match_method(line: str) -> Optional[Tuple[str, bool]]:
    """Recognise a method or constructor declaration on a stripped line.

    Returns ``(name, is_constructor)`` or ``None``.
    """

    match = METHOD_DECLARATION.match(line)
    if not match:
        return None
    type_name, name = match.group(1), match.group(2)
    if type_name in NOT_A_TYPE or name in NOT_A_TYPE:
        return None
    if "=" in line.split("(", 1)[0]:
        return None
    return name, type_name in MODIFIERS


def is_controller(path: Path, content: str) -> bool:
    return "Controller" in path.name or any(marker in content for marker in CONTROLLER_MARKERS)


def window(lines: List[str], start: int, end: int) -> List[Tuple[int, str]]:
    """Return ``(index, stripped line)`` pairs for ``lines[start:end]`` clamped to bounds."""

    start = max(0, start)
    end = min(end, len(lines))
    return [(index, lines[index].strip()) for index in range(start, end)]
