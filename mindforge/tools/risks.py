from mindforge.agent.state import AgentState
from mindforge.agent.validator import validate_risks
from mindforge.llm.gateway import Gateway
from mindforge.llm.prompts import RISKS_SYSTEM, RISKS_USER
from mindforge.llm.router import llm_json
from mindforge.llm.schemas import RisksFragment
from mindforge.tools.registry import register


@register("identify_risks")
async def identify_risks(gateway: Gateway, state: AgentState) -> RisksFragment:
    """Risks for the goal given the planned step titles. An empty list is valid."""
    titles = "\n".join(f"- {s.title}" for s in state.steps.action_steps)
    user = RISKS_USER.format(goal=state.goal_input.goal, step_titles=titles)
    raw = await llm_json(gateway, RISKS_SYSTEM, user)
    return validate_risks(raw)
