#!/usr/bin/env python3

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass
class OperationResult:
    success: bool
    output: str = ""
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


@dataclass
class RepoOutcome:
    name: str
    source: str
    phase: str
    success: bool


class RunReport:
    """Success/failure accounting for one run"""

    def __init__(self):
        self.succeeded = 0
        self.failed = 0
        self.outcomes: List[RepoOutcome] = []

    def record_success(self, outcome: Optional[RepoOutcome] = None) -> None:
        self.succeeded += 1
        if outcome is not None:
            self.outcomes.append(outcome)

    def record_failure(self, outcome: Optional[RepoOutcome] = None) -> None:
        self.failed += 1
        if outcome is not None:
            self.outcomes.append(outcome)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def summary(self) -> Tuple[int, int]:
        return self.succeeded, self.failed
