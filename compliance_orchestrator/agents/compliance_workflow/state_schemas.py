"""
State schemas for the LangGraph compliance workflow.
Defines the state passed between workflow nodes for one transaction.
"""
import operator
from enum import Enum
from typing import Annotated, Any, Dict, List, Mapping, Optional, TypedDict, Union

from compliance_orchestrator.models.check_result import CheckKind, CheckResult, SupervisorDecision
from compliance_orchestrator.models.decision import DecisionRecord
from compliance_orchestrator.models.transaction import Transaction


class WorkflowStep(str, Enum):
    """Named steps recorded in ``current_step`` for observability."""
    INITIALIZATION = "initialization"
    VALIDATION_COMPLETE = "validation_complete"
    VALIDATION_FAILED = "validation_failed"
    CHECKS_DISPATCHED = "checks_dispatched"
    DISPATCH_FAILED = "dispatch_failed"
    RISK_AGGREGATED = "risk_aggregated"
    SUPERVISOR_REVIEW_COMPLETE = "supervisor_review_complete"
    SUPERVISOR_REVIEW_FAILED = "supervisor_review_failed"
    REPORT_GENERATED = "report_generated"
    ERRORS_HANDLED = "errors_handled"


class ComplianceWorkflowState(TypedDict):
    """
    State for one compliance workflow run.

    Flow: START → validate_transaction → dispatch_checks → aggregate_risk
          → supervisor_review? → generate_report | handle_errors → END

    Created fresh per transaction and owned by a single graph invocation.
    """

    # Input
    payload: Union[Transaction, Mapping[str, Any], None]  # Raw submission as received
    transaction: Optional[Transaction]  # Set once validation passes

    # Check fan-out
    selected_checks: List[CheckKind]
    check_results: Dict[CheckKind, CheckResult]

    # Arbitration
    supervisor_decision: Optional[SupervisorDecision]

    # Scoring
    risk_score: float
    route: Optional[str]

    # Metadata
    current_step: WorkflowStep
    processing_time_ms: float  # Dispatch wall-clock time

    # Output
    decision: Optional[DecisionRecord]

    # Error handling (append-only)
    errors: Annotated[List[str], operator.add]


def initial_state(payload: Union[Transaction, Mapping[str, Any], None]) -> ComplianceWorkflowState:
    """Build a fresh state for one run."""
    return {
        "payload": payload,
        "transaction": None,
        "selected_checks": [],
        "check_results": {},
        "supervisor_decision": None,
        "risk_score": 0.0,
        "route": None,
        "current_step": WorkflowStep.INITIALIZATION,
        "processing_time_ms": 0.0,
        "decision": None,
        "errors": [],
    }
