"""
Collaborator interfaces for specialist checkers and supervisor arbitration.

The orchestrator never implements a check itself. Each compliance dimension
is served by an injected object exposing an async ``check`` coroutine, and
mid-band risk is arbitrated by an injected supervisor.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, runtime_checkable

from compliance_orchestrator.core.exceptions import CheckerRegistryError
from compliance_orchestrator.core.observability import get_logger
from compliance_orchestrator.models.check_result import (
    CHECK_ORDER,
    CheckKind,
    CheckResult,
    SupervisorDecision,
)
from compliance_orchestrator.models.transaction import Transaction

logger = get_logger(__name__)


@runtime_checkable
class SpecialistChecker(Protocol):
    """Evaluates one compliance dimension for a transaction. May raise."""

    async def check(
        self,
        transaction: Transaction,
        context: Optional[Mapping[str, Any]] = None,
    ) -> CheckResult:
        ...


@runtime_checkable
class Supervisor(Protocol):
    """Higher-authority reviewer for mid-band risk. Failure is fatal to the run."""

    async def arbitrate(
        self,
        transaction: Transaction,
        check_results: Mapping[CheckKind, CheckResult],
    ) -> SupervisorDecision:
        ...


class CheckerRegistry:
    """
    Closed mapping table from CheckKind to the checker that serves it.

    Every CheckKind must be covered; the table is read-only once built.
    """

    def __init__(self, checkers: Mapping[CheckKind | str, SpecialistChecker]):
        resolved: Dict[CheckKind, SpecialistChecker] = {}
        for raw_kind, checker in checkers.items():
            try:
                kind = CheckKind(raw_kind)
            except ValueError as e:
                raise CheckerRegistryError(f"Unknown check kind: {raw_kind!r}") from e
            if not isinstance(checker, SpecialistChecker):
                raise CheckerRegistryError(
                    f"Checker for {kind.value} does not provide an async check() method"
                )
            resolved[kind] = checker

        missing = [kind.value for kind in CHECK_ORDER if kind not in resolved]
        if missing:
            raise CheckerRegistryError(f"No checker registered for: {', '.join(missing)}")

        self._checkers = MappingProxyType(resolved)
        logger.debug("checker_registry_built", kinds=[kind.value for kind in CHECK_ORDER])

    def get(self, kind: CheckKind) -> SpecialistChecker:
        return self._checkers[kind]

    def __contains__(self, kind: object) -> bool:
        return kind in self._checkers

    def __iter__(self) -> Iterator[CheckKind]:
        return iter(CHECK_ORDER)

    def __len__(self) -> int:
        return len(self._checkers)

    def describe(self) -> Dict[str, str]:
        """Kind -> checker class name, for health reporting."""
        return {kind.value: type(self._checkers[kind]).__name__ for kind in CHECK_ORDER}
