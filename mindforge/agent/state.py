"""
Pipeline states and the per-run AgentState.
What it defines:
- AgentStep: the fixed, strictly ordered pipeline states
- AgentState: the transient state of ONE run (never persisted)
- transition(): pure (step, state) -> next step function

And, the main purpose:
Keep the control flow testable without any network calls.
"""


from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from mindforge.llm.schemas import (
    AgentResponse,
    GoalAnalysis,
    GoalInput,
    NextAction,
    RisksFragment,
    StepsFragment,
)


class AgentStep(str, Enum):
    INITIALIZE = "initialize"
    ANALYZE_COMPLEXITY = "analyze_complexity"
    GENERATE_STEPS = "generate_steps"
    IDENTIFY_RISKS = "identify_risks"
    DETERMINE_NEXT_ACTION = "determine_next_action"
    VALIDATE_OUTPUT = "validate_output"
    DONE = "done"
    FAILED = "failed"


PIPELINE: Tuple[AgentStep, ...] = (
    AgentStep.INITIALIZE,
    AgentStep.ANALYZE_COMPLEXITY,
    AgentStep.GENERATE_STEPS,
    AgentStep.IDENTIFY_RISKS,
    AgentStep.DETERMINE_NEXT_ACTION,
    AgentStep.VALIDATE_OUTPUT,
    AgentStep.DONE,
)

TERMINAL = frozenset({AgentStep.DONE, AgentStep.FAILED})

# tool step -> AgentState field holding its validated fragment
TOOL_RESULT_FIELDS = {
    AgentStep.ANALYZE_COMPLEXITY: "analysis",
    AgentStep.GENERATE_STEPS: "steps",
    AgentStep.IDENTIFY_RISKS: "risks",
    AgentStep.DETERMINE_NEXT_ACTION: "next_action",
}


@dataclass(frozen=True)
class AgentState:
    run_id: str
    step: AgentStep = AgentStep.INITIALIZE
    goal_input: Optional[GoalInput] = None
    analysis: Optional[GoalAnalysis] = None
    steps: Optional[StepsFragment] = None
    risks: Optional[RisksFragment] = None
    next_action: Optional[NextAction] = None
    response: Optional[AgentResponse] = None
    retries: int = 0
    error: Optional[Exception] = None
    failed_step: Optional[AgentStep] = None
    trace: Tuple[dict, ...] = ()


def transition(step: AgentStep, state: AgentState) -> AgentStep:
    if step in TERMINAL:
        return step
    if state.error is not None:
        return AgentStep.FAILED
    return PIPELINE[PIPELINE.index(step) + 1]
