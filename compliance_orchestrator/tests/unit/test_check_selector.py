"""
Unit tests for required-check selection.
"""
import pytest

from compliance_orchestrator.agents.compliance_workflow.check_selector import select_required_checks
from compliance_orchestrator.core.config import Settings
from compliance_orchestrator.models.check_result import CheckKind
from compliance_orchestrator.tests.fixtures import make_transaction


def test_high_value_transfer_with_user_selects_identity_and_sanctions(settings):
    transaction = make_transaction(amount=60000, user_id="user-42")

    assert select_required_checks(transaction, settings) == [CheckKind.IDENTITY, CheckKind.SANCTIONS]


def test_security_type_always_includes_jurisdiction(settings):
    transaction = make_transaction(type="security", amount=10, user_id=None)

    assert select_required_checks(transaction, settings) == [CheckKind.JURISDICTION]


@pytest.mark.parametrize("asset_type", ["security", "Security", " SECURITY "])
def test_security_asset_tag_includes_jurisdiction(settings, asset_type):
    transaction = make_transaction(type="trade", asset_type=asset_type, symbol="ACME", quantity=10)

    assert CheckKind.JURISDICTION in select_required_checks(transaction, settings)


def test_no_rule_fired_falls_back_to_defaults(settings):
    transaction = make_transaction(amount=100, user_id=None)

    assert select_required_checks(transaction, settings) == [CheckKind.IDENTITY, CheckKind.SANCTIONS]


def test_threshold_is_strictly_greater_than(settings):
    transaction = make_transaction(amount=50000, user_id="user-42")

    assert select_required_checks(transaction, settings) == [CheckKind.IDENTITY]


def test_all_rules_fire_in_canonical_order(settings):
    transaction = make_transaction(type="security", amount=75000, user_id="user-42")

    assert select_required_checks(transaction, settings) == [
        CheckKind.IDENTITY,
        CheckKind.SANCTIONS,
        CheckKind.JURISDICTION,
    ]


def test_configured_threshold_and_asset_types():
    settings = Settings(_env_file=None, high_value_threshold=500, security_asset_types=["bond"])
    transaction = make_transaction(type="trade", amount=600, user_id=None, asset_type="Bond")

    assert select_required_checks(transaction, settings) == [CheckKind.SANCTIONS, CheckKind.JURISDICTION]


def test_selection_is_deterministic(settings):
    transaction = make_transaction(amount=60000)

    assert select_required_checks(transaction, settings) == select_required_checks(transaction, settings)
