"""
Report Compiler - assembles the terminal DecisionRecord.

Three entry points:
- compile_report: normal path, from whatever check/supervisor results exist
- compile_error_report: error-handling node, one finding per error
- compile_failsafe_report: anything that escaped the graph (exceptions,
  timeouts, cancellation)
"""
from typing import Any, Dict, Iterable, List, Optional

from compliance_orchestrator.agents.compliance_workflow.state_schemas import (
    ComplianceWorkflowState,
    WorkflowStep,
)
from compliance_orchestrator.agents.compliance_workflow.validation import payload_transaction_id
from compliance_orchestrator.core.config import Settings
from compliance_orchestrator.core.observability import get_logger
from compliance_orchestrator.models.check_result import (
    CHECK_ORDER,
    DecisionStatus,
    Finding,
    FindingSeverity,
)
from compliance_orchestrator.models.decision import DecisionRecord

logger = get_logger(__name__)

# Single fixed recommendation for every escalation that did not come from the checks
ERROR_RECOMMENDATION = "Manual compliance review required due to system errors"
SUPERVISOR = "supervisor"


def _transaction_id(state: ComplianceWorkflowState) -> Optional[str]:
    transaction = state.get("transaction")
    if transaction is not None:
        return transaction.id
    return payload_transaction_id(state.get("payload"))


def _metadata(state: ComplianceWorkflowState) -> Dict[str, Any]:
    return {
        "dispatch_time_ms": state.get("processing_time_ms", 0.0),
        "route": state.get("route"),
        "selected_checks": [kind.value for kind in state.get("selected_checks", [])],
    }


def _error_findings(errors: Iterable[str]) -> List[Finding]:
    return [Finding(type="error", severity=FindingSeverity.CRITICAL, message=error) for error in errors]


def compile_report(state: ComplianceWorkflowState, settings: Settings) -> DecisionRecord:
    """
    Build the final record from the check results and supervisor decision.

    Status is escalated when the (possibly overridden) risk exceeds the
    supervisor threshold or the supervisor escalated; otherwise approved.
    """
    check_results = state["check_results"]
    supervisor_decision = state.get("supervisor_decision")
    risk_score = state["risk_score"]

    status = DecisionStatus.APPROVED
    if risk_score > settings.supervisor_review_threshold or (
        supervisor_decision is not None and supervisor_decision.status == DecisionStatus.ESCALATED
    ):
        status = DecisionStatus.ESCALATED

    findings: List[Finding] = []
    recommendations: List[str] = []
    checks_used: List[str] = []

    for kind in CHECK_ORDER:
        result = check_results.get(kind)
        if result is None:
            continue
        findings.extend(result.findings)
        recommendations.extend(result.recommendations)
        checks_used.append(kind.value)

    if supervisor_decision is not None:
        findings.extend(supervisor_decision.findings)
        recommendations.extend(supervisor_decision.recommendations)
        checks_used.append(SUPERVISOR)

    return DecisionRecord(
        transaction_id=_transaction_id(state),
        status=status,
        risk_score=risk_score,
        findings=findings,
        recommendations=recommendations,
        processing_time_ms=state.get("processing_time_ms", 0.0),
        checks_used=checks_used,
        metadata=_metadata(state),
    )


def compile_error_report(state: ComplianceWorkflowState) -> DecisionRecord:
    """Build the conservative record for the error path (escalated, risk 1.0)."""
    errors = list(state.get("errors", []))

    return DecisionRecord(
        transaction_id=_transaction_id(state),
        status=DecisionStatus.ESCALATED,
        risk_score=1.0,
        findings=_error_findings(errors),
        recommendations=[ERROR_RECOMMENDATION],
        processing_time_ms=state.get("processing_time_ms", 0.0),
        checks_used=[],
        errors=errors,
        metadata=_metadata(state),
    )


def compile_failsafe_report(
    transaction_id: Optional[str],
    errors: Iterable[str],
    message: str = "Workflow execution failed",
    processing_time_ms: float = 0.0,
    metadata: Optional[Dict[str, Any]] = None,
) -> DecisionRecord:
    """Record for failures outside the graph's own error handling."""
    return DecisionRecord(
        transaction_id=transaction_id,
        status=DecisionStatus.ESCALATED,
        risk_score=1.0,
        findings=_error_findings([message]),
        recommendations=[ERROR_RECOMMENDATION],
        processing_time_ms=processing_time_ms,
        checks_used=[],
        errors=list(errors),
        metadata=metadata or {},
    )


async def generate_report_node(state: ComplianceWorkflowState, settings: Settings) -> Dict[str, Any]:
    """LangGraph node: compile the final decision record."""
    decision = compile_report(state, settings)

    logger.info(
        "compliance_report_generated",
        transaction_id=decision.transaction_id,
        status=decision.status.value,
        risk_score=decision.risk_score,
        checks_used=decision.checks_used,
    )

    return {
        "decision": decision,
        "current_step": WorkflowStep.REPORT_GENERATED,
    }


async def handle_errors_node(state: ComplianceWorkflowState) -> Dict[str, Any]:
    """LangGraph node: convert accumulated errors into an escalated record."""
    decision = compile_error_report(state)

    logger.error(
        "workflow_errors_handled",
        transaction_id=decision.transaction_id,
        error_count=len(decision.errors),
        errors=decision.errors,
    )

    return {
        "decision": decision,
        "current_step": WorkflowStep.ERRORS_HANDLED,
    }
