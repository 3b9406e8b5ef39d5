"""Database access: pagination, connection pooling, SQL text and JPA entity mapping."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import MAX_IN_CLAUSE, MAX_POOL_SIZE, LineChecker, is_comment, string_literals

_issue = partial(make_issue, Category.DATABASE)

CONFIG_EXTENSIONS = (".properties", ".yml", ".yaml")

UNPAGED_FIND_ALL = re.compile(r"\bfindAll\s*\(\s*\)")
DIRECT_CONNECTION = re.compile(r"\bDriverManager\s*\.\s*getConnection\s*\(")
POOL_SIZE_SETTING = re.compile(r"(?:maximum-pool-size|maximumPoolSize|maxActive|max-active|maxPoolSize|max-total)\D*(\d+)")
TIMEOUT_HINTS = ("timeout", "max-wait", "maxWait")

SELECT_STAR = re.compile(r"\bselect\s+\*", re.IGNORECASE)
ANY_JOIN = re.compile(r"\bjoin\b", re.IGNORECASE)
TYPED_JOIN = re.compile(r"\b(?:inner|left|right|full|cross)(?:\s+outer)?\s+join\b", re.IGNORECASE)
ORDER_BY = re.compile(r"\border\s+by\b", re.IGNORECASE)
IN_CLAUSE = re.compile(r"\bin\s*\(([^)]+)\)", re.IGNORECASE)

ENTITY_CLASS = re.compile(r"\bclass\s+(\w+)")
COLLECTION_ASSOCIATIONS = ("@OneToMany", "@ManyToMany")
REPOSITORY_SUFFIXES = ("Repository.java", "Dao.java")
LARGE_REPOSITORY_CHARS = 500


def _is_entity(path: Path, content: str) -> bool:
    return path.name.endswith("Entity.java") or "@Entity" in content


def check_pagination(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        if UNPAGED_FIND_ALL.search(line) and "Pageable" not in line and not is_comment(line):
            issues.append(_issue(
                "missing pagination",
                "findAll() without paging may return an unbounded result set",
                str(path),
                Severity.MAJOR,
                index + 1,
                "Pass a Pageable and page through the results",
                "missing-pagination",
            ))
    return issues


def check_connection_pool(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        if DIRECT_CONNECTION.search(raw):
            issues.append(_issue(
                "missing connection pool",
                "Database connection opened directly instead of from a pool",
                str(path),
                Severity.MAJOR,
                index + 1,
                "Use a pooled DataSource such as HikariCP",
                "missing-connection-pool",
            ))

    if not path.name.endswith(CONFIG_EXTENSIONS):
        return issues

    for index, raw in enumerate(lines):
        match = POOL_SIZE_SETTING.search(raw)
        if match and int(match.group(1)) > MAX_POOL_SIZE:
            issues.append(_issue(
                "connection pool size",
                f"Connection pool size {match.group(1)} is probably too large",
                str(path),
                Severity.MINOR,
                index + 1,
                "Most applications need between 10 and 20 connections",
                "connection-pool-size",
            ))

    if "datasource" in content.lower() and not any(hint in content for hint in TIMEOUT_HINTS):
        first = next((index for index, raw in enumerate(lines) if "datasource" in raw.lower()), 0)
        issues.append(_issue(
            "connection timeout",
            "Datasource configuration sets no connection timeout",
            str(path),
            Severity.MINOR,
            first + 1,
            "Configure connection and idle timeouts",
            "connection-timeout",
        ))
    return issues


def check_sql_queries(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        sql = " ".join(string_literals(raw))
        if not sql:
            continue
        line_number = index + 1

        if SELECT_STAR.search(sql):
            issues.append(_issue(
                "SELECT *",
                "SELECT * fetches every column",
                str(path),
                Severity.MINOR,
                line_number,
                "List the columns the query needs",
                "select-star",
            ))

        if ANY_JOIN.search(sql) and not TYPED_JOIN.search(sql):
            issues.append(_issue(
                "JOIN type",
                "JOIN type is not stated explicitly",
                str(path),
                Severity.INFO,
                line_number,
                "Write INNER JOIN or LEFT JOIN explicitly",
                "join-type",
            ))

        if ORDER_BY.search(sql) and "index" not in sql.lower():
            issues.append(_issue(
                "ORDER BY",
                "ORDER BY may not be backed by an index",
                str(path),
                Severity.INFO,
                line_number,
                "Make sure the ORDER BY columns are indexed",
                "order-by",
            ))

        for match in IN_CLAUSE.finditer(sql):
            elements = len(match.group(1).split(","))
            if elements > MAX_IN_CLAUSE:
                issues.append(_issue(
                    "IN clause size",
                    f"IN clause lists {elements} elements",
                    str(path),
                    Severity.MAJOR,
                    line_number,
                    "Query in batches or join against a table instead",
                    "in-clause-size",
                ))
    return issues


def check_orm_usage(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []

    if _is_entity(path, content):
        class_match = ENTITY_CLASS.search(content)
        if class_match and "@NoArgsConstructor" not in content:
            name = re.escape(class_match.group(1))
            constructors = re.findall(rf"(?:public|protected|private)?\s*\b{name}\s*\(([^)]*)\)\s*(?:throws[^{{]*)?\{{", content)
            if constructors and all(params.strip() for params in constructors):
                issues.append(_issue(
                    "missing no-arg constructor",
                    "JPA entity declares constructors but no no-arg constructor",
                    str(path),
                    Severity.MAJOR,
                    None,
                    "JPA requires a public or protected no-arg constructor",
                    "no-arg-constructor",
                ))

        if "implements Serializable" not in content and "Serializable" not in content.split("{", 1)[0]:
            issues.append(_issue(
                "not serializable",
                "JPA entity does not implement Serializable",
                str(path),
                Severity.MINOR,
                None,
                "Implement Serializable so entities can be cached or sent across sessions",
                "serializable",
            ))

        for index, raw in enumerate(lines):
            line = raw.strip()
            if any(annotation in line for annotation in COLLECTION_ASSOCIATIONS) and "FetchType.LAZY" not in line:
                issues.append(_issue(
                    "eager collection",
                    "Collection association does not declare lazy loading",
                    str(path),
                    Severity.MINOR,
                    index + 1,
                    "Set fetch = FetchType.LAZY",
                    "lazy-loading",
                ))

    if path.name.endswith(REPOSITORY_SUFFIXES):
        if "@Query" not in content and len(content) > LARGE_REPOSITORY_CHARS:
            issues.append(_issue(
                "missing custom query",
                "Large repository relies only on derived queries",
                str(path),
                Severity.INFO,
                None,
                "Use @Query for complex lookups",
                "custom-query",
            ))
    return issues


class DatabaseChecker(LineChecker):
    category = Category.DATABASE
    extensions = (".java",) + CONFIG_EXTENSIONS
    heuristics = (
        check_pagination,
        check_connection_pool,
        check_sql_queries,
        check_orm_usage,
    )
