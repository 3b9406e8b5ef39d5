"""Performance: loop hazards, remote call patterns, caching and query shape."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List, Optional

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import (
    CACHE_WINDOW,
    LOOP_BODY_WINDOW,
    N_PLUS_ONE_WINDOW,
    NESTED_LOOP_WINDOW,
    LineChecker,
    is_comment,
    window,
)

_issue = partial(make_issue, Category.PERFORMANCE)

LOOP_START = re.compile(r"\b(?:for|while)\s*\(|\.forEach\s*\(")
DB_OPERATION = re.compile(
    r"\.(?:save\w*|update\w*|delete\w*|insert\w*|query\w*|persist|execute(?:Query|Update|Batch)?)\s*\("
)
HTTP_CALL = re.compile(r"\b(?:restTemplate|webClient|httpClient|HttpClient|okHttpClient)\b|https?://")
API_INVOCATION = re.compile(r"\b(?:restTemplate|webClient|httpClient|HttpClient)\s*\.\s*\w+\s*\(")
BLOCKING_REST_CALL = re.compile(r"\brestTemplate\s*\.\s*(?:getForObject|postForObject|getForEntity|postForEntity|exchange)\s*\(")
FOR_EACH_SOURCE = re.compile(r"\bfor\s*\(\s*(?:final\s+)?[\w.<>,?\[\]\s]+?\s+\w+\s*:\s*(?:this\.)?([\w]+)\s*\)")
FOR_EACH_RECEIVER = re.compile(r"(?:this\.)?(\w+)\.forEach\s*\(")
SAFE_ITERATION_HINTS = ("Iterator", "concurrent", "Concurrent", "CopyOnWrite")

CACHE_ANNOTATIONS = ("@Cacheable", "@CacheEvict", "@CachePut")
EXPENSIVE_CALL = re.compile(r"\.(?:findAll|findBy\w*|getAll\w*|select\w*)\s*\(")
CACHE_EXPIRY_HINTS = ("setTimeToLive", "expireAfterWrite", "expireAfterAccess", "entryTtl", "timeToLive")

COLLECTION_FETCH = re.compile(r"\.(?:findAll|findBy\w*)\s*\(")
PER_ITEM_FETCH = re.compile(
    r"\.(?:find\w*|fetch\w*|load\w*|get\w+By\w*)\s*\(|\.get[A-Z]\w*\(\)\s*\.\s*(?:size|stream|iterator|forEach|isEmpty)\s*\("
)
NATIVE_QUERY = re.compile(r"nativeQuery\s*=\s*true")
LIKE_QUERY = re.compile(r"\bfindBy\w*Like\w*\s*\(")
BULK_OPERATION = re.compile(r"\b(?:deleteAll|saveAll)\w*\s*\(")


def _is_loop(line: str) -> bool:
    return not is_comment(line) and bool(LOOP_START.search(line))


def _mutation_pattern(collection: str):
    return re.compile(rf"\b{re.escape(collection)}\s*\.\s*(?:add|remove|addAll|removeAll|clear|put)\s*\(")


def _iterated_collection(line: str) -> Optional[str]:
    match = FOR_EACH_SOURCE.search(line) or FOR_EACH_RECEIVER.search(line)
    return match.group(1) if match else None


def check_loop_optimization(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    total = len(lines)
    for index, raw in enumerate(lines):
        line = raw.strip()
        if not _is_loop(line):
            continue
        line_number = index + 1

        if index + NESTED_LOOP_WINDOW < total:
            if any(_is_loop(inner) for _, inner in window(lines, index + 1, index + NESTED_LOOP_WINDOW)):
                issues.append(_issue(
                    "nested loop",
                    "Nested loop found; the combined iteration count may hurt performance",
                    str(path),
                    Severity.MAJOR,
                    line_number,
                    "Reduce algorithmic complexity, e.g. index the inner data in a map",
                    "nested-loops",
                ))

        body = window(lines, index + 1, index + LOOP_BODY_WINDOW)
        if any(DB_OPERATION.search(inner) for _, inner in body if not is_comment(inner)):
            issues.append(_issue(
                "database operation in loop",
                "Database operation executed inside a loop",
                str(path),
                Severity.CRITICAL,
                line_number,
                "Use batch operations or move the query out of the loop",
                "loop-db-operation",
            ))

        collection = _iterated_collection(line)
        if collection and not any(hint in line for hint in SAFE_ITERATION_HINTS):
            mutation = _mutation_pattern(collection)
            same_line = line.split("forEach", 1)[1] if ".forEach" in line else ""
            candidates = [(index, same_line)] + body
            for inner_index, inner in candidates:
                if mutation.search(inner):
                    issues.append(_issue(
                        "collection modified in loop",
                        f"Collection {collection} is modified while being iterated; this can throw ConcurrentModificationException",
                        str(path),
                        Severity.MAJOR,
                        inner_index + 1,
                        "Use an Iterator's remove(), removeIf() or collect changes and apply them after the loop",
                        "collection-modification",
                    ))
                    break
    return issues


def check_api_call_frequency(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        if _is_loop(line):
            body = window(lines, index + 1, index + LOOP_BODY_WINDOW)
            if any(HTTP_CALL.search(inner) for _, inner in body if not is_comment(inner)):
                issues.append(_issue(
                    "API call in loop",
                    "HTTP request executed inside a loop",
                    str(path),
                    Severity.MAJOR,
                    index + 1,
                    "Batch the remote calls or issue them asynchronously",
                    "loop-api-call",
                ))
        if BLOCKING_REST_CALL.search(line):
            issues.append(_issue(
                "synchronous API call",
                "Blocking RestTemplate call ties up the request thread",
                str(path),
                Severity.MINOR,
                index + 1,
                "Consider WebClient for non-blocking calls",
                "sync-api-call",
            ))

    index = 0
    while index < len(lines):
        if API_INVOCATION.search(lines[index]):
            calls = sum(1 for _, inner in window(lines, index, index + LOOP_BODY_WINDOW) if API_INVOCATION.search(inner))
            if calls > 2:
                issues.append(_issue(
                    "sequential API calls",
                    f"{calls} API calls issued one after another",
                    str(path),
                    Severity.MAJOR,
                    index + 1,
                    "Run independent calls in parallel with CompletableFuture or WebClient",
                    "sequential-api-calls",
                ))
                index += LOOP_BODY_WINDOW
                continue
        index += 1
    return issues


def check_cache_usage(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    is_test = "test" in str(path).lower()

    for index, raw in enumerate(lines):
        line = raw.strip()
        line_number = index + 1

        if EXPENSIVE_CALL.search(line) and not is_test:
            nearby = window(lines, index - CACHE_WINDOW, index + CACHE_WINDOW)
            if not any("@Cacheable" in text for _, text in nearby):
                issues.append(_issue(
                    "missing cache",
                    "Repeated data lookup without caching",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Consider @Cacheable or a Redis cache for this lookup",
                    "missing-cache",
                ))

        if "@Cacheable" in line and "key" not in line and "condition" not in line:
            issues.append(_issue(
                "incomplete cache configuration",
                "Cache annotation has neither key nor condition",
                str(path),
                Severity.MINOR,
                line_number,
                "Add a key attribute to control cache hits",
                "cache-config",
            ))

    if ("CacheConfig" in path.name or "CacheManager" in path.name) and not any(
        hint in content for hint in CACHE_EXPIRY_HINTS
    ):
        issues.append(_issue(
            "cache expiration",
            "Cache configuration sets no expiry",
            str(path),
            Severity.MINOR,
            None,
            "Configure a time-to-live for cached entries",
            "cache-expiration",
        ))
    return issues


def check_query_optimization(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    for index, raw in enumerate(lines):
        line = raw.strip()
        line_number = index + 1

        if COLLECTION_FETCH.search(line):
            following = window(lines, index + 1, index + N_PLUS_ONE_WINDOW)
            for position, (_, inner) in enumerate(following):
                if _is_loop(inner) and any(PER_ITEM_FETCH.search(text) for _, text in following[position:]):
                    issues.append(_issue(
                        "N+1 query",
                        "Collection fetch followed by per-item fetches in a loop",
                        str(path),
                        Severity.MAJOR,
                        line_number,
                        "Use a JOIN FETCH query or @EntityGraph",
                        "n-plus-one-query",
                    ))
                    break

        if "@Query" in line and NATIVE_QUERY.search(line):
            issues.append(_issue(
                "native query",
                "Native SQL query; watch injection risk and database portability",
                str(path),
                Severity.MINOR,
                line_number,
                "Prefer JPQL or the Criteria API",
                "native-query",
            ))

        if LIKE_QUERY.search(line):
            issues.append(_issue(
                "LIKE query",
                "Derived LIKE query may not use an index",
                str(path),
                Severity.MINOR,
                line_number,
                "Index the column and avoid leading wildcards",
                "like-query",
            ))

        if BULK_OPERATION.search(line):
            issues.append(_issue(
                "bulk operation",
                "Bulk repository operation may load or lock many rows",
                str(path),
                Severity.INFO,
                line_number,
                "Process large data sets in batches or pages",
                "bulk-operation",
            ))
    return issues


class PerformanceChecker(LineChecker):
    category = Category.PERFORMANCE
    heuristics = (
        check_loop_optimization,
        check_api_call_frequency,
        check_cache_usage,
        check_query_optimization,
    )
