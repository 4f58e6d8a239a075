"""
In-memory collaborators for exercising the compliance workflow.
"""
import asyncio
from typing import Any, List, Mapping, Optional

from compliance_orchestrator.models.check_result import (
    CheckKind,
    CheckResult,
    DecisionStatus,
    Finding,
    FindingSeverity,
    SupervisorDecision,
)
from compliance_orchestrator.models.transaction import Transaction, TransactionType


def make_transaction(**overrides: Any) -> Transaction:
    """Valid low-value transfer with a user id unless overridden."""
    data = {
        "id": "txn-001",
        "type": TransactionType.TRANSFER,
        "amount": 100.0,
        "user_id": "user-42",
    }
    data.update(overrides)
    return Transaction(**data)


class StaticChecker:
    """Returns a fixed score, optionally after a delay."""

    def __init__(
        self,
        kind: CheckKind,
        risk_score: Optional[float] = 0.1,
        delay: float = 0.0,
        findings: Optional[List[Finding]] = None,
        recommendations: Optional[List[str]] = None,
    ):
        self.kind = kind
        self.risk_score = risk_score
        self.delay = delay
        self.findings = findings if findings is not None else [
            Finding(type=f"{kind.value}_screen", severity=FindingSeverity.LOW, message=f"{kind.value} check completed")
        ]
        self.recommendations = recommendations if recommendations is not None else [f"{kind.value} recommendation"]
        self.calls: List[Transaction] = []

    async def check(self, transaction: Transaction, context: Optional[Mapping[str, Any]] = None) -> CheckResult:
        self.calls.append(transaction)
        if self.delay:
            await asyncio.sleep(self.delay)
        return CheckResult(
            kind=self.kind,
            risk_score=self.risk_score,
            findings=self.findings,
            recommendations=self.recommendations,
        )


class EchoChecker:
    """Reports the transaction id it was called with, to detect cross-run leaks."""

    def __init__(self, kind: CheckKind, risk_score: float = 0.1, delay: float = 0.0):
        self.kind = kind
        self.risk_score = risk_score
        self.delay = delay

    async def check(self, transaction: Transaction, context: Optional[Mapping[str, Any]] = None) -> CheckResult:
        await asyncio.sleep(self.delay)
        return CheckResult(
            kind=self.kind,
            risk_score=self.risk_score,
            findings=[Finding(type="echo", message=f"{self.kind.value}:{transaction.id}")],
            recommendations=[f"review {transaction.id}"],
        )


class FailingChecker:
    """Always raises."""

    def __init__(self, kind: CheckKind, message: str = "checker unavailable", delay: float = 0.0):
        self.kind = kind
        self.message = message
        self.delay = delay
        self.calls: List[Transaction] = []

    async def check(self, transaction: Transaction, context: Optional[Mapping[str, Any]] = None) -> CheckResult:
        self.calls.append(transaction)
        if self.delay:
            await asyncio.sleep(self.delay)
        raise RuntimeError(self.message)


class BarrierChecker:
    """Only completes once ``parties`` checkers are in flight at the same time."""

    def __init__(self, kind: CheckKind, barrier: "CountingBarrier", risk_score: float = 0.2):
        self.kind = kind
        self.barrier = barrier
        self.risk_score = risk_score

    async def check(self, transaction: Transaction, context: Optional[Mapping[str, Any]] = None) -> CheckResult:
        await self.barrier.arrive()
        return CheckResult(kind=self.kind, risk_score=self.risk_score)


class CountingBarrier:
    def __init__(self, parties: int, timeout: float = 1.0):
        self.parties = parties
        self.timeout = timeout
        self.arrived = 0
        self._released = asyncio.Event()

    async def arrive(self) -> None:
        self.arrived += 1
        if self.arrived >= self.parties:
            self._released.set()
        await asyncio.wait_for(self._released.wait(), self.timeout)


class ConcurrencyTrackingChecker:
    """Tracks how many checks are in flight at once."""

    def __init__(self, kind: CheckKind, delay: float = 0.02):
        self.kind = kind
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def check(self, transaction: Transaction, context: Optional[Mapping[str, Any]] = None) -> CheckResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return CheckResult(kind=self.kind, risk_score=0.1)
        finally:
            self.in_flight -= 1


class StaticSupervisor:
    """Returns a fixed decision and records what it was shown."""

    def __init__(
        self,
        risk_score: float = 0.2,
        status: DecisionStatus = DecisionStatus.APPROVED,
        findings: Optional[List[Finding]] = None,
        recommendations: Optional[List[str]] = None,
    ):
        self.risk_score = risk_score
        self.status = status
        self.findings = findings if findings is not None else [
            Finding(type="supervisor_review", severity=FindingSeverity.MEDIUM, message="Supervisor reviewed")
        ]
        self.recommendations = recommendations if recommendations is not None else ["supervisor recommendation"]
        self.calls: List[tuple] = []

    async def arbitrate(
        self,
        transaction: Transaction,
        check_results: Mapping[CheckKind, CheckResult],
    ) -> SupervisorDecision:
        self.calls.append((transaction, dict(check_results)))
        return SupervisorDecision(
            risk_score=self.risk_score,
            status=self.status,
            findings=self.findings,
            recommendations=self.recommendations,
        )


class FailingSupervisor:
    def __init__(self, message: str = "supervisor offline"):
        self.message = message
        self.calls = 0

    async def arbitrate(
        self,
        transaction: Transaction,
        check_results: Mapping[CheckKind, CheckResult],
    ) -> SupervisorDecision:
        self.calls += 1
        raise RuntimeError(self.message)
