"""
Orchestration Service - entry point the transport layer calls.

Wraps a ComplianceWorkflow with batch execution (bounded concurrency,
results in input order) and a lightweight health check.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from compliance_orchestrator.agents.compliance_workflow.workflow_executor import ComplianceWorkflow
from compliance_orchestrator.core.observability import get_logger
from compliance_orchestrator.models.check_result import CHECK_ORDER, DecisionStatus
from compliance_orchestrator.models.decision import DecisionRecord
from compliance_orchestrator.models.transaction import Transaction

logger = get_logger(__name__)

TransactionInput = Union[Transaction, Mapping[str, Any]]


class ComplianceOrchestrationService:
    """
    Service for running compliance workflows for one or many transactions.

    Holds no per-transaction state; every call gets its own workflow run.
    """

    def __init__(self, workflow: ComplianceWorkflow, batch_concurrency: Optional[int] = None):
        self.workflow = workflow
        self.batch_concurrency = (
            workflow.settings.batch_concurrency if batch_concurrency is None else batch_concurrency
        )
        if self.batch_concurrency < 1:
            raise ValueError("batch_concurrency must be at least 1")

    async def execute(self, transaction: TransactionInput, **kwargs: Any) -> DecisionRecord:
        """Run one transaction (``timeout`` is forwarded to the workflow)."""
        return await self.workflow.execute(transaction, **kwargs)

    async def execute_batch(self, transactions: Sequence[TransactionInput]) -> List[DecisionRecord]:
        """
        Run many transactions concurrently.

        At most ``batch_concurrency`` workflows run at once. Each run is
        independent, so one escalated or failed transaction never affects
        the others.

        Returns:
            DecisionRecords in the same order as ``transactions``
        """
        semaphore = asyncio.Semaphore(self.batch_concurrency)

        logger.info(
            "batch_compliance_checks_started",
            batch_size=len(transactions),
            concurrency=self.batch_concurrency,
        )

        async def _run(transaction: TransactionInput) -> DecisionRecord:
            async with semaphore:
                return await self.workflow.execute(transaction)

        results = await asyncio.gather(*(_run(transaction) for transaction in transactions))

        logger.info(
            "batch_compliance_checks_completed",
            batch_size=len(transactions),
            escalated=sum(1 for record in results if record.status == DecisionStatus.ESCALATED),
        )

        return list(results)

    async def health(self) -> Dict[str, Any]:
        """
        Report whether the workflow is ready to serve.

        Healthy means the graph is compiled and every check kind has a checker.
        """
        checked_at = datetime.now(timezone.utc).isoformat()

        try:
            missing = [kind.value for kind in CHECK_ORDER if kind not in self.workflow.registry]
            graph_ready = self.workflow.graph is not None
            healthy = graph_ready and not missing

            if healthy:
                message = "Orchestrator is healthy"
            elif missing:
                message = f"No checker registered for: {', '.join(missing)}"
            else:
                message = "Compliance graph is not compiled"

            return {
                "healthy": healthy,
                "message": message,
                "last_check": checked_at,
                "checkers": self.workflow.registry.describe() if not missing else {},
            }

        except Exception as e:
            logger.error("health_check_failed", error=str(e))
            return {
                "healthy": False,
                "message": f"Health check failed: {e}",
                "last_check": checked_at,
                "checkers": {},
            }
