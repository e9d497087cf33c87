"""
Orchestrates one goal analysis run.
What it does:
- Validates the goal input and obtains a gateway (initialize)
- Runs the four tools strictly in order, threading each fragment into the next
- Retries each tool step as a whole (fresh LLM call) with exponential backoff
- Assembles the AgentResponse and validates it a final time
- Stops at the first step that exhausts its retries (fail-fast, no partial output)

And, the main purpose:
Drive initialize → tools → validate_output → done.
"""


import asyncio
from dataclasses import replace
from typing import Any, Callable

# tool modules register themselves on import
import mindforge.tools.complexity  # noqa: F401
import mindforge.tools.next_action  # noqa: F401
import mindforge.tools.risks  # noqa: F401
import mindforge.tools.steps  # noqa: F401
from mindforge.agent.state import (
    TERMINAL,
    TOOL_RESULT_FIELDS,
    AgentState,
    AgentStep,
    transition,
)
from mindforge.agent.tracer import trace
from mindforge.agent.validator import validate_agent_response, validate_goal_input
from mindforge.core.errors import AgentError, ValidationError
from mindforge.core.ids import new_id
from mindforge.core.logging import get_logger
from mindforge.llm.gateway import Gateway, RetryPolicy, Sleep
from mindforge.llm.schemas import AgentResponse
from mindforge.tools.registry import get_tool

log = get_logger("agent.orchestrator")


def _step_error(step: AgentStep, exc: Exception) -> AgentError:
    err = AgentError(f"Step {step.value} failed: {exc}", step=step.value)
    err.__cause__ = exc
    return err


class Orchestrator:
    """
    Serves exactly one request. Build a new instance per run.
    """

    def __init__(
        self,
        gateway_provider: Callable[[], Gateway],
        *,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
        run_id: str | None = None,
    ):
        self.gateway_provider = gateway_provider
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.run_id = run_id or new_id("run")
        self.state = AgentState(run_id=self.run_id)
        self._gateway: Gateway | None = None
        self._started = False

    async def run(self, body: Any) -> AgentResponse:
        if self._started:
            raise AgentError("Orchestrator already used; create one per request")
        self._started = True

        state = self.state
        step = AgentStep.INITIALIZE
        while step not in TERMINAL:
            state = await self.advance(step, replace(state, step=step), body)
            step = transition(step, state)
        self.state = state = replace(state, step=step)

        if step is AgentStep.FAILED:
            log.error(f"[{self.run_id}] Run failed at {state.failed_step.value}: {state.error}")
            raise state.error
        log.info(f"[{self.run_id}] Run done (retries={state.retries})")
        return state.response

    async def advance(self, step: AgentStep, state: AgentState, body: Any = None) -> AgentState:
        if step is AgentStep.INITIALIZE:
            return self._initialize(state, body)
        if step in TOOL_RESULT_FIELDS:
            return await self._run_tool(step, state)
        if step is AgentStep.VALIDATE_OUTPUT:
            return self._validate_output(state)
        raise AgentError(f"No handler for step {step.value}")

    def _fail(self, state: AgentState, step: AgentStep, err: Exception) -> AgentState:
        log.error(f"[{self.run_id}] {step.value} failed: {err}")
        state = trace(state, step.value, "step_failed", {"error": str(err)})
        return replace(state, error=err, failed_step=step)

    def _initialize(self, state: AgentState, body: Any) -> AgentState:
        step = AgentStep.INITIALIZE
        try:
            goal_input = validate_goal_input(body)
            log.info(
                f"[{self.run_id}] Input validated - Goal: \"{goal_input.goal[:50]}...\", Priority: {goal_input.priority}"
            )
            # missing key must surface before any network call
            self._gateway = self.gateway_provider()
        except AgentError as e:
            if e.step is None:
                e.step = step.value
            return self._fail(state, step, e)
        except ValidationError as e:
            # stays field-attributed so it maps to a 400
            return self._fail(state, step, e)
        state = trace(state, step.value, "step_done")
        return replace(state, goal_input=goal_input)

    async def _run_tool(self, step: AgentStep, state: AgentState) -> AgentState:
        tool = get_tool(step.value)
        policy = self.policy
        last_err: Exception | None = None

        for attempt in range(policy.max_attempts):
            state = trace(state, step.value, "step_start", {"attempt": attempt + 1})
            log.info(f"[{self.run_id}] {step.value} attempt {attempt + 1}/{policy.max_attempts}")
            try:
                result = await tool(self._gateway, state)
            except Exception as e:
                last_err = e
                if not getattr(e, "retryable", True) or attempt + 1 >= policy.max_attempts:
                    break
                backoff = policy.delay(attempt)
                log.warning(f"[{self.run_id}] {step.value} failed: {e}. retrying in {backoff:.1f}s")
                state = trace(state, step.value, "step_retry", {"error": str(e), "backoff_s": backoff})
                state = replace(state, retries=state.retries + 1)
                await self.sleep(backoff)
                continue

            state = trace(state, step.value, "step_done", {"attempt": attempt + 1})
            return replace(state, **{TOOL_RESULT_FIELDS[step]: result})

        return self._fail(state, step, _step_error(step, last_err))

    def _validate_output(self, state: AgentState) -> AgentState:
        step = AgentStep.VALIDATE_OUTPUT
        try:
            assembled = {
                "goalAnalysis": state.analysis.to_wire(),
                "actionSteps": [s.to_wire() for s in state.steps.action_steps],
                "totalEstimatedTime": state.steps.total_estimated_time,
                "risks": [r.to_wire() for r in state.risks.risks],
                "nextImmediateAction": state.next_action.to_wire(),
            }
            response = validate_agent_response(assembled)
        except (ValueError, AttributeError) as e:
            return self._fail(state, step, _step_error(step, e))
        log.info(f"[{self.run_id}] Output validated successfully")
        state = trace(state, step.value, "step_done")
        return replace(state, response=response)
