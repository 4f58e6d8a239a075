"""
Compliance workflow orchestrator.

Routes a financial transaction through identity, sanctions and jurisdiction
checks, aggregates their risk, arbitrates the mid band and returns an
auditable DecisionRecord.
"""

from compliance_orchestrator.agents.compliance_workflow import ComplianceWorkflow, create_compliance_workflow
from compliance_orchestrator.models import (
    CheckKind,
    CheckResult,
    DecisionRecord,
    DecisionStatus,
    Finding,
    FindingSeverity,
    SupervisorDecision,
    Transaction,
    TransactionType,
)
from compliance_orchestrator.services.orchestration_service import ComplianceOrchestrationService

__version__ = "1.0.0"

__all__ = [
    "ComplianceWorkflow",
    "ComplianceOrchestrationService",
    "create_compliance_workflow",
    "CheckKind",
    "CheckResult",
    "DecisionRecord",
    "DecisionStatus",
    "Finding",
    "FindingSeverity",
    "SupervisorDecision",
    "Transaction",
    "TransactionType",
]
