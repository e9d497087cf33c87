from mindforge.agent.state import AgentState
from mindforge.agent.validator import validate_steps
from mindforge.llm.gateway import Gateway
from mindforge.llm.prompts import STEP_RANGES, STEPS_SYSTEM, STEPS_USER
from mindforge.llm.router import llm_json
from mindforge.llm.schemas import StepsFragment
from mindforge.tools.registry import register


"""
Step generation tool.

What it does:
- Breaks the goal into ordered ActionSteps plus a total time estimate
- Asks for more steps the more complex the goal is (hint only, not validated)
- Factors in the user's time budget when one was given
Main purpose:
Produce the body of the plan.
"""

def _time_line(time_available: str | None) -> str:
    if time_available:
        return f"Time Available: {time_available}"
    return "Time Available: Not specified"


@register("generate_steps")
async def generate_steps(gateway: Gateway, state: AgentState) -> StepsFragment:
    complexity = state.analysis.complexity
    user = STEPS_USER.format(
        goal=state.goal_input.goal,
        complexity=complexity,
        step_range=STEP_RANGES[complexity],
        time_line=_time_line(state.goal_input.time_available),
    )
    raw = await llm_json(gateway, STEPS_SYSTEM, user)
    return validate_steps(raw)
