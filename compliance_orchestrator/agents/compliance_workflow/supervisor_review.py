"""
Supervisor Review - arbitration for mid-band risk.

The supervisor sees the transaction plus every check result gathered so far.
Its risk score replaces the aggregate, and an 'escalated' status forces the
final decision to escalated. Unlike a specialist checker, a failing
supervisor is a workflow-level error.
"""
from types import MappingProxyType
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from compliance_orchestrator.agents.compliance_workflow.state_schemas import (
    ComplianceWorkflowState,
    WorkflowStep,
)
from compliance_orchestrator.core.exceptions import SupervisorReviewError
from compliance_orchestrator.core.observability import get_logger
from compliance_orchestrator.models.check_result import CheckKind, CheckResult, SupervisorDecision
from compliance_orchestrator.models.transaction import Transaction
from compliance_orchestrator.services.checkers import Supervisor

logger = get_logger(__name__)


def _coerce_decision(decision: Any) -> SupervisorDecision:
    if isinstance(decision, SupervisorDecision):
        return decision
    if isinstance(decision, Mapping):
        try:
            return SupervisorDecision.model_validate(dict(decision))
        except ValidationError as e:
            raise SupervisorReviewError(f"Supervisor returned an invalid decision: {e}") from e
    raise SupervisorReviewError(
        f"Supervisor returned {type(decision).__name__}, expected SupervisorDecision"
    )


async def request_arbitration(
    transaction: Transaction,
    check_results: Mapping[CheckKind, CheckResult],
    supervisor: Supervisor,
) -> SupervisorDecision:
    """
    Ask the supervisor to arbitrate.

    Raises:
        SupervisorReviewError: If the supervisor raises or returns an unusable decision
    """
    try:
        decision = await supervisor.arbitrate(transaction, MappingProxyType(dict(check_results)))
    except Exception as e:
        raise SupervisorReviewError(f"Supervisor review failed: {e}") from e

    return _coerce_decision(decision)


async def supervisor_review_node(state: ComplianceWorkflowState, supervisor: Supervisor) -> Dict[str, Any]:
    """
    LangGraph node: run supervisor arbitration and override the risk score.

    Returns:
        Dict with supervisor_decision and risk_score updates, or an error
    """
    transaction = state["transaction"]

    logger.info(
        "supervisor_review_started",
        transaction_id=transaction.id,
        risk_score=round(state["risk_score"], 4),
        checks=[kind.value for kind in state["check_results"]],
    )

    try:
        decision = await request_arbitration(transaction, state["check_results"], supervisor)
    except SupervisorReviewError as e:
        logger.error("supervisor_review_failed", transaction_id=transaction.id, error=str(e))
        return {
            "errors": [str(e)],
            "current_step": WorkflowStep.SUPERVISOR_REVIEW_FAILED,
        }

    logger.info(
        "supervisor_review_completed",
        transaction_id=transaction.id,
        aggregated_risk=round(state["risk_score"], 4),
        supervisor_risk=decision.risk_score,
        supervisor_status=decision.status.value,
    )

    return {
        "supervisor_decision": decision,
        "risk_score": decision.risk_score,
        "current_step": WorkflowStep.SUPERVISOR_REVIEW_COMPLETE,
    }


def route_after_supervisor(state: ComplianceWorkflowState) -> str:
    """Conditional edge: supervisor failures go to error handling."""
    return "error" if state["errors"] else "report"
