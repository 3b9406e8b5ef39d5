"""Checker registry for the review engine."""

from __future__ import annotations

from typing import List

from .api_design import ApiDesignChecker
from .base import Checker, LineChecker
from .code_structure import CodeStructureChecker
from .configuration import ConfigurationChecker
from .database import DatabaseChecker
from .environment import EnvironmentChecker
from .exception_handling import ExceptionHandlingChecker
from .maintainability import MaintainabilityChecker
from .performance import PerformanceChecker
from .security import SecurityChecker
from .service_relation import ServiceRelationChecker
from .third_party import ThirdPartyChecker
from .thread_safety import ThreadSafetyChecker
from .transaction import TransactionChecker

CHECKER_TYPES = (
    CodeStructureChecker,
    PerformanceChecker,
    SecurityChecker,
    DatabaseChecker,
    ThreadSafetyChecker,
    ApiDesignChecker,
    ExceptionHandlingChecker,
    ConfigurationChecker,
    ServiceRelationChecker,
    TransactionChecker,
    EnvironmentChecker,
    MaintainabilityChecker,
    ThirdPartyChecker,
)


def load_checkers(logger=None) -> List[Checker]:
    return [checker_type(logger=logger) for checker_type in CHECKER_TYPES]


__all__ = ["CHECKER_TYPES", "Checker", "LineChecker", "load_checkers"]
