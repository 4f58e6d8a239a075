"""
Risk Aggregator & Routing Policy.

Aggregation is the arithmetic mean of the scores that came back; failed
checks (and results without a score) are left out of numerator and
denominator alike. Routing sends only the mid band to supervisor review:
very low and very high risk both go straight to the report.
"""
from enum import Enum
from typing import Any, Dict, Mapping, Sequence

from compliance_orchestrator.agents.compliance_workflow.state_schemas import (
    ComplianceWorkflowState,
    WorkflowStep,
)
from compliance_orchestrator.core.config import EmptyResultPolicy, Settings
from compliance_orchestrator.core.observability import get_logger, record_route
from compliance_orchestrator.models.check_result import CheckKind, CheckResult

logger = get_logger(__name__)

NO_SCORE_ERROR = "No compliance check produced a risk score"


class Route(str, Enum):
    """Branches leaving the aggregation step."""
    ERROR = "error"
    SUPERVISOR = "supervisor"
    REPORT = "report"


def aggregate_risk(check_results: Mapping[CheckKind, CheckResult]) -> float:
    """Mean of the present risk scores; 0.0 when none are present."""
    scores = [result.risk_score for result in check_results.values() if result.risk_score is not None]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def decide_route(risk_score: float, errors: Sequence[str], settings: Settings) -> Route:
    """
    Pick the next branch. Precedence:
    1. any error -> ERROR
    2. risk > escalation threshold -> REPORT (no supervisor review)
    3. risk > supervisor threshold -> SUPERVISOR
    4. otherwise -> REPORT
    """
    if errors:
        return Route.ERROR
    if risk_score > settings.escalation_threshold:
        return Route.REPORT
    if risk_score > settings.supervisor_review_threshold:
        return Route.SUPERVISOR
    return Route.REPORT


async def aggregate_risk_node(state: ComplianceWorkflowState, settings: Settings) -> Dict[str, Any]:
    """
    LangGraph node: aggregate check scores and decide the next branch.

    Returns:
        Dict with risk_score and route updates (plus an error under the
        fail-safe empty-result policy)
    """
    transaction = state["transaction"]
    check_results = state["check_results"]

    risk_score = aggregate_risk(check_results)
    scored = sum(1 for result in check_results.values() if result.risk_score is not None)

    new_errors = []
    if scored == 0:
        if settings.empty_result_policy == EmptyResultPolicy.FAIL_SAFE:
            new_errors.append(NO_SCORE_ERROR)
        logger.warning(
            "no_scored_check_results",
            transaction_id=transaction.id,
            selected=[kind.value for kind in state["selected_checks"]],
            policy=settings.empty_result_policy.value,
        )

    route = decide_route(risk_score, list(state["errors"]) + new_errors, settings)
    record_route(route.value, enabled=settings.enable_metrics)

    logger.info(
        "risk_aggregated",
        transaction_id=transaction.id,
        risk_score=round(risk_score, 4),
        scored_checks=scored,
        route=route.value,
    )

    update: Dict[str, Any] = {
        "risk_score": risk_score,
        "route": route.value,
        "current_step": WorkflowStep.RISK_AGGREGATED,
    }
    if new_errors:
        update["errors"] = new_errors
    return update


def route_after_aggregation(state: ComplianceWorkflowState) -> str:
    """Conditional edge: follow the branch chosen by the aggregation node."""
    return state["route"] or Route.ERROR.value
