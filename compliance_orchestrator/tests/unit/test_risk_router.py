"""
Unit tests for risk aggregation and routing.
"""
import pytest

from compliance_orchestrator.agents.compliance_workflow.risk_router import (
    NO_SCORE_ERROR,
    Route,
    aggregate_risk,
    aggregate_risk_node,
    decide_route,
    route_after_aggregation,
)
from compliance_orchestrator.agents.compliance_workflow.state_schemas import WorkflowStep, initial_state
from compliance_orchestrator.core.config import EmptyResultPolicy, Settings
from compliance_orchestrator.models.check_result import CheckKind, CheckResult
from compliance_orchestrator.tests.fixtures import make_transaction


def _results(**scores):
    return {CheckKind(kind): CheckResult(kind=kind, risk_score=score) for kind, score in scores.items()}


def _state(check_results):
    state = initial_state(None)
    state["transaction"] = make_transaction()
    state["selected_checks"] = list(check_results)
    state["check_results"] = check_results
    return state


class TestAggregateRisk:

    def test_mean_of_scores(self):
        assert aggregate_risk(_results(identity=0.25, sanctions=0.75)) == pytest.approx(0.5)

    def test_unscored_results_are_excluded(self):
        assert aggregate_risk(_results(identity=0.6, sanctions=None)) == pytest.approx(0.6)

    def test_no_results_is_zero(self):
        assert aggregate_risk({}) == 0.0

    def test_stays_within_bounds(self):
        assert 0.0 <= aggregate_risk(_results(identity=1.0, sanctions=1.0, jurisdiction=0.0)) <= 1.0


class TestDecideRoute:

    @pytest.mark.parametrize(
        "risk_score,expected",
        [
            (0.0, Route.REPORT),
            (0.30, Route.REPORT),
            (0.31, Route.SUPERVISOR),
            (0.70, Route.SUPERVISOR),
            (0.71, Route.REPORT),
            (1.0, Route.REPORT),
        ],
    )
    def test_threshold_bands(self, settings, risk_score, expected):
        assert decide_route(risk_score, [], settings) == expected

    def test_errors_take_precedence(self, settings):
        assert decide_route(0.5, ["boom"], settings) == Route.ERROR

    def test_custom_thresholds(self):
        settings = Settings(_env_file=None, supervisor_review_threshold=0.1, escalation_threshold=0.2)

        assert decide_route(0.15, [], settings) == Route.SUPERVISOR
        assert decide_route(0.25, [], settings) == Route.REPORT


@pytest.mark.asyncio
async def test_node_sets_score_and_route(settings):
    state = _state(_results(identity=0.4, sanctions=0.6))

    update = await aggregate_risk_node(state, settings)

    assert update["risk_score"] == pytest.approx(0.5)
    assert update["route"] == "supervisor"
    assert update["current_step"] == WorkflowStep.RISK_AGGREGATED
    assert "errors" not in update


@pytest.mark.asyncio
async def test_empty_results_pass_silently_by_default(settings):
    update = await aggregate_risk_node(_state({}), settings)

    assert update["risk_score"] == 0.0
    assert update["route"] == "report"
    assert "errors" not in update


@pytest.mark.asyncio
async def test_empty_results_fail_safe_policy():
    settings = Settings(_env_file=None, empty_result_policy=EmptyResultPolicy.FAIL_SAFE)

    update = await aggregate_risk_node(_state({}), settings)

    assert update["errors"] == [NO_SCORE_ERROR]
    assert update["route"] == "error"


def test_route_after_aggregation_follows_stored_route():
    state = initial_state(None)
    state["route"] = "supervisor"
    assert route_after_aggregation(state) == "supervisor"

    state["route"] = None
    assert route_after_aggregation(state) == "error"
