"""
Data models for the compliance workflow orchestrator.

This module contains Pydantic models for:
- Transactions (input)
- Check results and supervisor decisions (collaborator output)
- Decision records (terminal output)
"""

from compliance_orchestrator.models.transaction import Transaction, TransactionType
from compliance_orchestrator.models.check_result import (
    CHECK_ORDER,
    CheckKind,
    CheckResult,
    DecisionStatus,
    Finding,
    FindingSeverity,
    SupervisorDecision,
)
from compliance_orchestrator.models.decision import DecisionRecord

__all__ = [
    "Transaction",
    "TransactionType",
    "CHECK_ORDER",
    "CheckKind",
    "CheckResult",
    "DecisionStatus",
    "Finding",
    "FindingSeverity",
    "SupervisorDecision",
    "DecisionRecord",
]
