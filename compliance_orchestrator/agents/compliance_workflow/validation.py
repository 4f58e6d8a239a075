"""
Structural validation of transaction payloads.

Runs before any checker is dispatched; a failure here sends the workflow
straight to error handling.
"""
from decimal import Decimal
from numbers import Real
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from compliance_orchestrator.agents.compliance_workflow.state_schemas import (
    ComplianceWorkflowState,
    WorkflowStep,
)
from compliance_orchestrator.core.exceptions import TransactionValidationError
from compliance_orchestrator.core.observability import get_logger
from compliance_orchestrator.models.transaction import Transaction, TransactionType

logger = get_logger(__name__)

_VALID_TYPES = ", ".join(t.value for t in TransactionType)


def _as_payload(transaction: Transaction | Mapping[str, Any] | None) -> Dict[str, Any]:
    if isinstance(transaction, Transaction):
        return transaction.model_dump()
    if isinstance(transaction, Mapping):
        return dict(transaction)
    raise TransactionValidationError(["Transaction payload must be a mapping"])


def collect_validation_errors(payload: Mapping[str, Any]) -> List[str]:
    """
    Return the structural problems with a payload, empty if it is well formed.

    Rules:
    - id and type are required
    - type must be one of the supported transaction types
    - amount, when present, must be a non-negative number
    """
    errors: List[str] = []

    missing = [field for field in ("id", "type") if not payload.get(field)]
    if missing:
        errors.append(f"Missing required transaction fields: {', '.join(missing)}")

    raw_type = payload.get("type")
    if raw_type:
        try:
            TransactionType(raw_type)
        except ValueError:
            errors.append(f"Unsupported transaction type: {raw_type!r} (expected one of {_VALID_TYPES})")

    amount = payload.get("amount")
    if amount is not None:
        if isinstance(amount, bool) or not isinstance(amount, (Real, Decimal)):
            errors.append("Transaction amount must be a number")
        elif amount < 0:
            errors.append("Invalid transaction amount: must be non-negative")

    return errors


def validate_transaction(transaction: Transaction | Mapping[str, Any] | None) -> Transaction:
    """
    Validate a transaction or raw payload and return an immutable Transaction.

    Raises:
        TransactionValidationError: with one message per problem found
    """
    payload = _as_payload(transaction)

    errors = collect_validation_errors(payload)
    if errors:
        raise TransactionValidationError(errors)

    if isinstance(transaction, Transaction):
        return transaction

    if payload.get("amount") is None:
        payload.pop("amount", None)

    try:
        return Transaction.model_validate(payload)
    except ValidationError as e:
        raise TransactionValidationError(
            [f"{'.'.join(str(p) for p in err['loc']) or 'transaction'}: {err['msg']}" for err in e.errors()]
        ) from e


def payload_transaction_id(transaction: Transaction | Mapping[str, Any] | None) -> str | None:
    """Best-effort transaction id for logging and error records."""
    if isinstance(transaction, Transaction):
        return getattr(transaction, "id", None) or None
    if isinstance(transaction, Mapping):
        raw_id = transaction.get("id")
        return str(raw_id) if raw_id else None
    return None


async def validate_transaction_node(state: ComplianceWorkflowState) -> Dict[str, Any]:
    """
    LangGraph node: structurally validate the submitted transaction.

    Returns:
        Dict with the validated transaction, or the validation errors
    """
    payload = state["payload"]

    try:
        transaction = validate_transaction(payload)
    except TransactionValidationError as e:
        logger.error(
            "transaction_validation_failed",
            transaction_id=payload_transaction_id(payload),
            errors=e.errors,
        )
        return {
            "errors": e.errors,
            "current_step": WorkflowStep.VALIDATION_FAILED,
        }
    except Exception as e:
        logger.error("transaction_validation_error", error=str(e))
        return {
            "errors": [f"Transaction validation failed: {e}"],
            "current_step": WorkflowStep.VALIDATION_FAILED,
        }

    logger.info("transaction_validated", transaction_id=transaction.id, type=transaction.type.value)

    return {
        "transaction": transaction,
        "current_step": WorkflowStep.VALIDATION_COMPLETE,
    }
