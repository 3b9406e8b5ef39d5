"""Microservice wiring: dependency injection, Feign clients and discovery."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import List

from codereview.result import Category, Issue, make_issue
from codereview.severity import Severity

from .base import LineChecker, is_comment

_issue = partial(make_issue, Category.SERVICE_RELATION)

INJECTED_SERVICE = re.compile(r"\b(?:private\s+)?(?:final\s+)?(\w+Service)\s+\w+\s*;")
INJECTION_ANNOTATIONS = ("@Autowired", "@Resource", "@Inject")
DISCOVERY_ANNOTATIONS = ("@EnableDiscoveryClient", "@EnableEurekaClient")
HEALTH_HINTS = ("HealthIndicator", "health", "actuator")
FALLBACK_ATTRIBUTES = ("fallback", "fallbackFactory")


def check_service_relations(path: Path, content: str, lines: List[str]) -> List[Issue]:
    issues: List[Issue] = []
    is_service = path.stem.endswith(("Service", "ServiceImpl"))

    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line or is_comment(line):
            continue
        line_number = index + 1

        if is_service:
            match = INJECTED_SERVICE.search(line)
            previous = lines[index - 1].strip() if index else ""
            injected = any(annotation in line or annotation in previous for annotation in INJECTION_ANNOTATIONS)
            if match and injected:
                issues.append(_issue(
                    "service dependency",
                    f"Service injects {match.group(1)}; check that the two services do not depend on each other",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Break cycles with events or a shared lower-level component",
                    "circular-dependency",
                ))

        if "@FeignClient" in line and not any(attribute in line for attribute in FALLBACK_ATTRIBUTES):
            issues.append(_issue(
                "Feign client without fallback",
                "@FeignClient has no fallback; a failing downstream service will cascade",
                str(path),
                Severity.MAJOR,
                line_number,
                "Configure fallback or fallbackFactory",
                "feign-fallback",
            ))

        if any(annotation in line for annotation in DISCOVERY_ANNOTATIONS):
            if not any(hint in content for hint in HEALTH_HINTS):
                issues.append(_issue(
                    "missing health check",
                    "Service registers for discovery but exposes no health check",
                    str(path),
                    Severity.MINOR,
                    line_number,
                    "Add spring-boot-starter-actuator or a HealthIndicator",
                    "health-check",
                ))
    return issues


class ServiceRelationChecker(LineChecker):
    category = Category.SERVICE_RELATION
    heuristics = (check_service_relations,)
