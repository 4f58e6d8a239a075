"""
Unit tests for the checker registry and collaborator protocols.
"""
import pytest

from compliance_orchestrator.core.exceptions import CheckerRegistryError
from compliance_orchestrator.models.check_result import CheckKind
from compliance_orchestrator.services.checkers import CheckerRegistry, SpecialistChecker, Supervisor
from compliance_orchestrator.tests.fixtures import FailingSupervisor, StaticChecker, StaticSupervisor


class _NotAChecker:
    def evaluate(self, transaction):
        return None


class TestCheckerRegistry:

    def test_covers_every_kind(self, checkers):
        registry = CheckerRegistry(checkers)

        assert len(registry) == 3
        assert list(registry) == [CheckKind.IDENTITY, CheckKind.SANCTIONS, CheckKind.JURISDICTION]
        assert registry.get(CheckKind.SANCTIONS) is checkers[CheckKind.SANCTIONS]

    def test_accepts_string_keys(self):
        registry = CheckerRegistry({kind.value: StaticChecker(kind) for kind in CheckKind})
        assert CheckKind.JURISDICTION in registry

    def test_missing_kind_rejected(self):
        with pytest.raises(CheckerRegistryError, match="jurisdiction"):
            CheckerRegistry({
                CheckKind.IDENTITY: StaticChecker(CheckKind.IDENTITY),
                CheckKind.SANCTIONS: StaticChecker(CheckKind.SANCTIONS),
            })

    def test_unknown_kind_rejected(self, checkers):
        with pytest.raises(CheckerRegistryError, match="Unknown check kind"):
            CheckerRegistry({**checkers, "credit": StaticChecker(CheckKind.IDENTITY)})

    def test_object_without_check_rejected(self, checkers):
        with pytest.raises(CheckerRegistryError):
            CheckerRegistry({**checkers, CheckKind.IDENTITY: _NotAChecker()})

    def test_describe(self, registry):
        assert registry.describe() == {
            "identity": "StaticChecker",
            "sanctions": "StaticChecker",
            "jurisdiction": "StaticChecker",
        }


def test_fixtures_satisfy_protocols():
    assert isinstance(StaticChecker(CheckKind.IDENTITY), SpecialistChecker)
    assert isinstance(StaticSupervisor(), Supervisor)
    assert isinstance(FailingSupervisor(), Supervisor)
    assert not isinstance(_NotAChecker(), SpecialistChecker)
