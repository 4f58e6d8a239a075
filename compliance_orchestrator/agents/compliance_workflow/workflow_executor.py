"""
Compliance Workflow Executor - Main LangGraph workflow orchestrator.
Coordinates validation, parallel checks, risk routing, supervisor review
and report compilation for a single transaction.
"""
import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from langgraph.graph import END, StateGraph

from compliance_orchestrator.agents.compliance_workflow.check_dispatcher import dispatch_checks_node
from compliance_orchestrator.agents.compliance_workflow.report_compiler import (
    compile_failsafe_report,
    generate_report_node,
    handle_errors_node,
)
from compliance_orchestrator.agents.compliance_workflow.risk_router import (
    Route,
    aggregate_risk_node,
    route_after_aggregation,
)
from compliance_orchestrator.agents.compliance_workflow.state_schemas import (
    ComplianceWorkflowState,
    WorkflowStep,
    initial_state,
)
from compliance_orchestrator.agents.compliance_workflow.supervisor_review import (
    route_after_supervisor,
    supervisor_review_node,
)
from compliance_orchestrator.agents.compliance_workflow.validation import (
    payload_transaction_id,
    validate_transaction_node,
)
from compliance_orchestrator.core.config import Settings, get_settings
from compliance_orchestrator.core.exceptions import CheckerRegistryError, ComplianceWorkflowError
from compliance_orchestrator.core.observability import (
    get_logger,
    record_workflow_complete,
    track_active_workflow,
)
from compliance_orchestrator.models.check_result import CheckKind
from compliance_orchestrator.models.decision import DecisionRecord
from compliance_orchestrator.models.transaction import Transaction
from compliance_orchestrator.services.checkers import CheckerRegistry, SpecialistChecker, Supervisor

logger = get_logger(__name__)

NodeUpdate = Dict[str, Any]

# Sentinel so that an explicit ``timeout=None`` can disable the configured deadline
_USE_CONFIGURED = object()


def _route_on_errors(state: ComplianceWorkflowState) -> str:
    """Conditional edge shared by steps that either continue or fail."""
    return "error" if state["errors"] else "continue"


class ComplianceWorkflow:
    """
    State machine routing one transaction through the compliance checks.

    Checkers and the supervisor are injected; the compiled graph is built
    once and holds no per-run state, so one instance can serve any number of
    concurrent ``execute`` calls.
    """

    def __init__(
        self,
        checkers: Union[CheckerRegistry, Mapping[CheckKind, SpecialistChecker]],
        supervisor: Supervisor,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            checkers: CheckKind -> checker mapping (or a prebuilt CheckerRegistry)
            supervisor: Arbitrator for mid-band risk
            settings: Optional settings override (defaults to environment settings)

        Raises:
            CheckerRegistryError: If a check kind has no checker or the supervisor is unusable
        """
        self.settings = settings or get_settings()
        self.registry = checkers if isinstance(checkers, CheckerRegistry) else CheckerRegistry(checkers)

        if not isinstance(supervisor, Supervisor):
            raise CheckerRegistryError("Supervisor does not provide an async arbitrate() method")
        self.supervisor = supervisor

        self.graph = self.build_graph()

    # ========================================================================
    # Nodes
    # ========================================================================

    async def _traced(
        self,
        node: str,
        state: ComplianceWorkflowState,
        step: Callable[[], Awaitable[NodeUpdate]],
    ) -> NodeUpdate:
        """Run a node and emit one transition event for it."""
        update = await step()

        transaction = state.get("transaction") or update.get("transaction")
        logger.info(
            "workflow_transition",
            node=node,
            transaction_id=transaction.id if transaction else payload_transaction_id(state["payload"]),
            from_step=WorkflowStep(state["current_step"]).value,
            to_step=WorkflowStep(update.get("current_step", state["current_step"])).value,
            new_errors=len(update.get("errors", [])),
        )
        return update

    async def _validate(self, state: ComplianceWorkflowState) -> NodeUpdate:
        return await self._traced("validate_transaction", state, lambda: validate_transaction_node(state))

    async def _dispatch(self, state: ComplianceWorkflowState) -> NodeUpdate:
        return await self._traced(
            "dispatch_checks", state, lambda: dispatch_checks_node(state, self.registry, self.settings)
        )

    async def _aggregate(self, state: ComplianceWorkflowState) -> NodeUpdate:
        return await self._traced("aggregate_risk", state, lambda: aggregate_risk_node(state, self.settings))

    async def _supervise(self, state: ComplianceWorkflowState) -> NodeUpdate:
        return await self._traced(
            "supervisor_review", state, lambda: supervisor_review_node(state, self.supervisor)
        )

    async def _report(self, state: ComplianceWorkflowState) -> NodeUpdate:
        return await self._traced("generate_report", state, lambda: generate_report_node(state, self.settings))

    async def _handle_errors(self, state: ComplianceWorkflowState) -> NodeUpdate:
        return await self._traced("handle_errors", state, lambda: handle_errors_node(state))

    # ========================================================================
    # LangGraph Workflow Builder
    # ========================================================================

    def build_graph(self):
        """
        Build the LangGraph StateGraph for the compliance workflow.

        Workflow:
        1. validate_transaction: structural validation (errors -> handle_errors)
        2. dispatch_checks: select and run checkers in parallel (errors -> handle_errors)
        3. aggregate_risk: mean score + routing policy
        4. supervisor_review: mid-band arbitration (errors -> handle_errors)
        5. generate_report / handle_errors: terminal DecisionRecord

        Returns:
            Compiled StateGraph ready for execution
        """
        workflow = StateGraph(ComplianceWorkflowState)

        workflow.add_node("validate_transaction", self._validate)
        workflow.add_node("dispatch_checks", self._dispatch)
        workflow.add_node("aggregate_risk", self._aggregate)
        workflow.add_node("supervisor_review", self._supervise)
        workflow.add_node("generate_report", self._report)
        workflow.add_node("handle_errors", self._handle_errors)

        workflow.set_entry_point("validate_transaction")
        workflow.add_conditional_edges(
            "validate_transaction",
            _route_on_errors,
            {"continue": "dispatch_checks", "error": "handle_errors"},
        )
        workflow.add_conditional_edges(
            "dispatch_checks",
            _route_on_errors,
            {"continue": "aggregate_risk", "error": "handle_errors"},
        )
        workflow.add_conditional_edges(
            "aggregate_risk",
            route_after_aggregation,
            {
                Route.SUPERVISOR.value: "supervisor_review",
                Route.REPORT.value: "generate_report",
                Route.ERROR.value: "handle_errors",
            },
        )
        workflow.add_conditional_edges(
            "supervisor_review",
            route_after_supervisor,
            {"report": "generate_report", "error": "handle_errors"},
        )
        workflow.add_edge("generate_report", END)
        workflow.add_edge("handle_errors", END)

        return workflow.compile()

    # ========================================================================
    # Public API
    # ========================================================================

    async def _run_graph(self, state: ComplianceWorkflowState, snapshot: Dict[str, Any]) -> Dict[str, Any]:
        """Stream the graph, keeping ``snapshot`` at the latest full state."""
        final_state: Dict[str, Any] = dict(state)
        async for values in self.graph.astream(state, stream_mode="values"):
            snapshot.clear()
            snapshot.update(values)
            final_state = values
        return final_state

    def _partial_failure(self, snapshot: Dict[str, Any], transaction_id: Optional[str], reason: str) -> DecisionRecord:
        """Best-effort record from whatever state was reached before the run stopped."""
        transaction = snapshot.get("transaction")
        return compile_failsafe_report(
            transaction_id=transaction.id if transaction else transaction_id,
            errors=list(snapshot.get("errors", [])) + [reason],
            message=reason,
            metadata={
                "last_step": WorkflowStep(snapshot.get("current_step", WorkflowStep.INITIALIZATION)).value,
                "completed_checks": [kind.value for kind in snapshot.get("check_results", {})],
            },
        )

    async def execute(
        self,
        transaction: Union[Transaction, Mapping[str, Any]],
        timeout: Union[float, None, object] = _USE_CONFIGURED,
    ) -> DecisionRecord:
        """
        Route a transaction through the compliance workflow.

        Never raises: validation failures, orchestration errors, timeouts,
        cancellation and unexpected exceptions all end in an escalated record.

        Args:
            transaction: Transaction model or raw payload mapping
            timeout: Deadline in seconds for the whole run; defaults to
                ``workflow_timeout_seconds``, ``None`` disables it

        Returns:
            The final DecisionRecord
        """
        start_time = time.perf_counter()
        if timeout is _USE_CONFIGURED:
            timeout = self.settings.workflow_timeout_seconds

        transaction_id = payload_transaction_id(transaction)
        state = initial_state(transaction)
        snapshot: Dict[str, Any] = dict(state)

        logger.info("compliance_workflow_started", transaction_id=transaction_id, timeout=timeout)

        with track_active_workflow(enabled=self.settings.enable_metrics):
            try:
                final_state = await asyncio.wait_for(self._run_graph(state, snapshot), timeout)
                decision = final_state.get("decision")
                if decision is None:
                    raise ComplianceWorkflowError("Workflow finished without a decision record")

            except asyncio.TimeoutError:
                logger.error("compliance_workflow_timed_out", transaction_id=transaction_id, timeout=timeout)
                decision = self._partial_failure(
                    snapshot, transaction_id, f"Workflow timed out after {timeout}s"
                )

            except asyncio.CancelledError:
                # Cancellation still hands the caller a record
                logger.error("compliance_workflow_cancelled", transaction_id=transaction_id)
                decision = self._partial_failure(snapshot, transaction_id, "Workflow cancelled")

            except Exception as e:
                logger.exception("compliance_workflow_failed", transaction_id=transaction_id, error=str(e))
                decision = compile_failsafe_report(
                    transaction_id=transaction_id,
                    errors=[str(e) or type(e).__name__],
                )

        processing_time_ms = (time.perf_counter() - start_time) * 1000
        decision = decision.model_copy(update={"processing_time_ms": processing_time_ms})
        record_workflow_complete(
            decision.status.value, processing_time_ms, enabled=self.settings.enable_metrics
        )

        logger.info(
            "compliance_workflow_completed",
            transaction_id=decision.transaction_id,
            status=decision.status.value,
            risk_score=decision.risk_score,
            checks_used=decision.checks_used,
            duration_ms=round(processing_time_ms, 2),
        )

        return decision


def create_compliance_workflow(
    checkers: Mapping[CheckKind, SpecialistChecker],
    supervisor: Supervisor,
    settings: Optional[Settings] = None,
) -> ComplianceWorkflow:
    """Factory for a ready-to-run workflow."""
    return ComplianceWorkflow(checkers=checkers, supervisor=supervisor, settings=settings)
