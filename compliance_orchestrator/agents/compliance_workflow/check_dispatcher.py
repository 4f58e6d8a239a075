"""
Check Dispatcher - runs the selected specialist checkers concurrently.

All checkers are awaited until they settle. A checker that raises (or hands
back something that is not a CheckResult for its kind) simply contributes no
result; it is logged and counted, never retried, and never turned into a
workflow error. Only failures of the dispatch logic itself raise DispatchError.
"""
import asyncio
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from compliance_orchestrator.agents.compliance_workflow.check_selector import select_required_checks
from compliance_orchestrator.agents.compliance_workflow.state_schemas import (
    ComplianceWorkflowState,
    WorkflowStep,
)
from compliance_orchestrator.core.config import Settings, get_settings
from compliance_orchestrator.core.exceptions import DispatchError
from compliance_orchestrator.core.observability import get_logger, record_checker_failure
from compliance_orchestrator.models.check_result import CheckKind, CheckResult
from compliance_orchestrator.models.transaction import Transaction
from compliance_orchestrator.services.checkers import CheckerRegistry, SpecialistChecker

logger = get_logger(__name__)


def _coerce_result(kind: CheckKind, result: Any) -> CheckResult:
    """Accept a CheckResult (or a plain mapping) for ``kind``; reject anything else."""
    if isinstance(result, Mapping):
        data = dict(result)
        data.setdefault("kind", kind)
        result = CheckResult.model_validate(data)

    if not isinstance(result, CheckResult):
        raise TypeError(f"{kind.value} checker returned {type(result).__name__}, expected CheckResult")

    if result.kind != kind:
        raise ValueError(f"{kind.value} checker returned a {result.kind.value} result")

    return result


async def _run_checker(kind: CheckKind, checker: SpecialistChecker, transaction: Transaction) -> CheckResult:
    result = await checker.check(transaction)
    return _coerce_result(kind, result)


async def dispatch_checks(
    transaction: Transaction,
    checks: Sequence[CheckKind],
    registry: CheckerRegistry,
    settings: Optional[Settings] = None,
) -> Dict[CheckKind, CheckResult]:
    """
    Invoke every selected checker concurrently and collect the results.

    Args:
        transaction: Validated transaction
        checks: Checks to run, in dispatch order
        registry: CheckKind -> checker mapping table
        settings: Optional settings override (metrics switch)

    Returns:
        Results keyed by kind, in dispatch order; failed checkers are absent

    Raises:
        DispatchError: If the checks cannot be dispatched at all
    """
    settings = settings or get_settings()

    if not checks:
        raise DispatchError("No compliance checks selected for dispatch")

    planned: List[tuple[CheckKind, SpecialistChecker]] = []
    for kind in checks:
        if kind not in registry:
            raise DispatchError(f"No checker registered for {CheckKind(kind).value}")
        planned.append((kind, registry.get(kind)))

    outcomes = await asyncio.gather(
        *(_run_checker(kind, checker, transaction) for kind, checker in planned),
        return_exceptions=True,
    )

    results: Dict[CheckKind, CheckResult] = {}
    for (kind, _), outcome in zip(planned, outcomes):
        if isinstance(outcome, (Exception, asyncio.CancelledError)):
            logger.error(
                "checker_failed",
                transaction_id=transaction.id,
                kind=kind.value,
                error=str(outcome) or type(outcome).__name__,
            )
            record_checker_failure(kind.value, enabled=settings.enable_metrics)
            continue
        if isinstance(outcome, BaseException):
            raise outcome
        results[kind] = outcome

    return results


async def dispatch_checks_node(
    state: ComplianceWorkflowState,
    registry: CheckerRegistry,
    settings: Settings,
) -> Dict[str, Any]:
    """
    LangGraph node: select the required checks and fan out to their checkers.

    Returns:
        Dict with selected_checks, check_results and processing_time_ms updates
    """
    transaction = state["transaction"]
    start_time = time.perf_counter()

    try:
        checks = select_required_checks(transaction, settings)

        logger.info(
            "parallel_checks_started",
            transaction_id=transaction.id,
            checks=[kind.value for kind in checks],
        )

        check_results = await dispatch_checks(transaction, checks, registry, settings)
        processing_time_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "parallel_checks_completed",
            transaction_id=transaction.id,
            completed=[kind.value for kind in check_results],
            failed=[kind.value for kind in checks if kind not in check_results],
            duration_ms=round(processing_time_ms, 2),
        )

        return {
            "selected_checks": checks,
            "check_results": check_results,
            "processing_time_ms": processing_time_ms,
            "current_step": WorkflowStep.CHECKS_DISPATCHED,
        }

    except Exception as e:
        logger.error("parallel_checks_failed", transaction_id=transaction.id, error=str(e))

        return {
            "errors": [f"Parallel checks failed: {e}"],
            "processing_time_ms": (time.perf_counter() - start_time) * 1000,
            "current_step": WorkflowStep.DISPATCH_FAILED,
        }
