"""Pytest configuration and shared fixtures for compliance workflow tests."""

import pytest

from compliance_orchestrator.agents.compliance_workflow.workflow_executor import ComplianceWorkflow
from compliance_orchestrator.core.config import Settings
from compliance_orchestrator.models.check_result import CheckKind
from compliance_orchestrator.services.checkers import CheckerRegistry
from compliance_orchestrator.tests.fixtures import StaticChecker, StaticSupervisor, make_transaction


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def checkers():
    """One low-risk checker per check kind."""
    return {kind: StaticChecker(kind, risk_score=0.1) for kind in CheckKind}


@pytest.fixture
def registry(checkers):
    return CheckerRegistry(checkers)


@pytest.fixture
def supervisor():
    return StaticSupervisor()


@pytest.fixture
def workflow(checkers, supervisor, settings):
    return ComplianceWorkflow(checkers=checkers, supervisor=supervisor, settings=settings)


@pytest.fixture
def transaction():
    """Low-value transfer with a user id (selects the identity check only)."""
    return make_transaction()
