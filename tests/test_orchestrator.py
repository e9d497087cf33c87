from __future__ import annotations

import asyncio

import pytest

from mindforge.agent import orchestrator as orchestrator_module
from mindforge.agent.orchestrator import Orchestrator
from mindforge.agent.state import PIPELINE, AgentState, AgentStep, transition
from mindforge.core.errors import AgentError, ConfigurationError, GatewayError, ValidationError
from mindforge.llm.gateway import RetryPolicy

TOOL_ORDER = ["analyze_complexity", "generate_steps", "identify_risks", "determine_next_action"]
BODY = {"goal": "Learn guitar basics", "priority": "medium"}


def _orchestrator(gateway, sleep, **kwargs) -> Orchestrator:
    return Orchestrator(lambda: gateway, policy=RetryPolicy(max_attempts=3, base_delay=1.0), sleep=sleep, **kwargs)


def test_transition_walks_pipeline_in_order() -> None:
    state = AgentState(run_id="run_test")
    step = AgentStep.INITIALIZE
    seen = [step]
    while step is not AgentStep.DONE:
        step = transition(step, state)
        seen.append(step)
    assert tuple(seen) == PIPELINE


@pytest.mark.parametrize("step", [s for s in PIPELINE if s is not AgentStep.DONE])
def test_transition_to_failed_from_any_step(step) -> None:
    state = AgentState(run_id="run_test", error=AgentError("boom"))
    assert transition(step, state) is AgentStep.FAILED


def test_terminal_steps_do_not_move() -> None:
    state = AgentState(run_id="run_test", error=AgentError("boom"))
    assert transition(AgentStep.FAILED, state) is AgentStep.FAILED
    assert transition(AgentStep.DONE, AgentState(run_id="run_test")) is AgentStep.DONE


def test_run_executes_tools_in_order(gateway_cls, sleep) -> None:
    gateway = gateway_cls()
    orch = _orchestrator(gateway, sleep)

    response = asyncio.run(orch.run(BODY))

    assert gateway.calls == TOOL_ORDER
    assert len(response.action_steps) == 4
    assert response.goal_analysis.complexity == "moderate"
    assert orch.state.step is AgentStep.DONE
    assert orch.state.retries == 0
    assert sleep.delays == []
    done = [e["step"] for e in orch.state.trace if e["type"] == "step_done"]
    assert done == ["initialize", *TOOL_ORDER, "validate_output"]


def test_run_is_structurally_idempotent(gateway_cls, sleep) -> None:
    first = asyncio.run(_orchestrator(gateway_cls(), sleep).run(BODY))
    second = asyncio.run(_orchestrator(gateway_cls(), sleep).run(BODY))
    assert first.to_wire() == second.to_wire()


def test_step_retries_with_fresh_call_after_bad_fragment(gateway_cls, sleep, fragments) -> None:
    gateway = gateway_cls({"analyze_complexity": ["Let me think about that...", fragments["analyze_complexity"]]})
    orch = _orchestrator(gateway, sleep)

    asyncio.run(orch.run(BODY))

    assert gateway.calls.count("analyze_complexity") == 2
    assert orch.state.retries == 1
    assert sleep.delays == [1.0]
    retries = [e for e in orch.state.trace if e["type"] == "step_retry"]
    assert retries[0]["step"] == "analyze_complexity"


def test_step_retries_after_validation_failure(gateway_cls, sleep, fragments) -> None:
    empty_steps = {"actionSteps": [], "totalEstimatedTime": "0"}
    gateway = gateway_cls({"generate_steps": [empty_steps, empty_steps, fragments["generate_steps"]]})

    response = asyncio.run(_orchestrator(gateway, sleep).run(BODY))

    assert gateway.calls.count("generate_steps") == 3
    assert sleep.delays == [1.0, 2.0]
    assert len(response.action_steps) == 4


def test_exhausted_step_fails_fast(gateway_cls, sleep) -> None:
    gateway = gateway_cls({"generate_steps": [GatewayError("API error 500: down", status_code=500)]})
    orch = _orchestrator(gateway, sleep)

    with pytest.raises(AgentError) as exc_info:
        asyncio.run(orch.run(BODY))

    assert exc_info.value.step == "generate_steps"
    assert isinstance(exc_info.value.__cause__, GatewayError)
    assert gateway.calls == ["analyze_complexity"] + ["generate_steps"] * 3
    assert "identify_risks" not in gateway.calls
    assert "determine_next_action" not in gateway.calls
    assert orch.state.step is AgentStep.FAILED
    assert orch.state.failed_step is AgentStep.GENERATE_STEPS
    assert orch.state.response is None
    assert sleep.delays == [1.0, 2.0]


def test_exhausted_validation_failure_is_agent_error(gateway_cls, sleep) -> None:
    gateway = gateway_cls({"determine_next_action": [{"action": "", "reasoning": "x", "timeframe": "Today"}]})

    with pytest.raises(AgentError) as exc_info:
        asyncio.run(_orchestrator(gateway, sleep).run(BODY))

    assert not isinstance(exc_info.value, ValidationError)
    assert exc_info.value.step == "determine_next_action"


def test_non_retryable_gateway_error_is_not_retried(gateway_cls, sleep) -> None:
    gateway = gateway_cls({"analyze_complexity": [GatewayError("API error 401: bad key", status_code=401)]})

    with pytest.raises(AgentError) as exc_info:
        asyncio.run(_orchestrator(gateway, sleep).run(BODY))

    assert exc_info.value.step == "analyze_complexity"
    assert gateway.calls == ["analyze_complexity"]
    assert sleep.delays == []


def test_invalid_input_fails_before_gateway_is_built(sleep) -> None:
    built = {"count": 0}

    def provider():
        built["count"] += 1
        raise AssertionError("gateway should not be built")

    orch = Orchestrator(provider, sleep=sleep)
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(orch.run({"goal": "", "priority": "medium"}))

    assert exc_info.value.field == "goal"
    assert built["count"] == 0
    assert orch.state.failed_step is AgentStep.INITIALIZE


def test_missing_configuration_fails_in_initialize(sleep) -> None:
    def provider():
        raise ConfigurationError("OpenRouter API key is not configured")

    orch = Orchestrator(provider, sleep=sleep)
    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(orch.run(BODY))

    assert exc_info.value.step == "initialize"
    assert orch.state.step is AgentStep.FAILED


def test_final_validation_failure_fails_run(gateway_cls, sleep, monkeypatch) -> None:
    def reject(data):
        raise ValidationError("actionSteps[0].title", "corrupted")

    monkeypatch.setattr(orchestrator_module, "validate_agent_response", reject)
    orch = _orchestrator(gateway_cls(), sleep)

    with pytest.raises(AgentError) as exc_info:
        asyncio.run(orch.run(BODY))

    assert exc_info.value.step == "validate_output"
    assert "actionSteps[0].title" in str(exc_info.value)
    assert orch.state.response is None


def test_orchestrator_serves_one_request(gateway_cls, sleep) -> None:
    orch = _orchestrator(gateway_cls(), sleep)
    asyncio.run(orch.run(BODY))

    with pytest.raises(AgentError, match="already used"):
        asyncio.run(orch.run(BODY))
