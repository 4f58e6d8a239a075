"""
Required-Check Selector - decides which specialist checks a transaction needs.
Pure and deterministic: the same transaction always yields the same checks.
"""
from typing import Iterable, List, Optional

from compliance_orchestrator.core.config import Settings, get_settings
from compliance_orchestrator.models.check_result import CHECK_ORDER, CheckKind
from compliance_orchestrator.models.transaction import Transaction, TransactionType

# Baseline screen when no rule fires
DEFAULT_CHECKS: tuple[CheckKind, ...] = (CheckKind.IDENTITY, CheckKind.SANCTIONS)


def _is_security_instrument(transaction: Transaction, security_asset_types: Iterable[str]) -> bool:
    if transaction.type == TransactionType.SECURITY:
        return True
    if not transaction.asset_type:
        return False
    return transaction.asset_type.strip().lower() in set(security_asset_types)


def select_required_checks(
    transaction: Transaction,
    settings: Optional[Settings] = None,
) -> List[CheckKind]:
    """
    Map a transaction to the checks that must run.

    Rules are evaluated independently:
    - identity: the transaction carries a user id
    - sanctions: amount exceeds the high-value threshold
    - jurisdiction: type is 'security' or the asset-type tag marks a security
    - none fired: identity + sanctions

    Returns:
        Duplicate-free list in canonical dispatch order
    """
    settings = settings or get_settings()
    selected: set[CheckKind] = set()

    if transaction.user_id:
        selected.add(CheckKind.IDENTITY)

    if transaction.amount > settings.high_value_threshold:
        selected.add(CheckKind.SANCTIONS)

    if _is_security_instrument(transaction, settings.security_asset_types_set):
        selected.add(CheckKind.JURISDICTION)

    if not selected:
        selected.update(DEFAULT_CHECKS)

    return [kind for kind in CHECK_ORDER if kind in selected]
