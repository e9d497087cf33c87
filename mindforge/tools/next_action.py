from mindforge.agent.state import AgentState
from mindforge.agent.validator import validate_next_action
from mindforge.llm.gateway import Gateway
from mindforge.llm.prompts import NEXT_ACTION_SYSTEM, NEXT_ACTION_USER
from mindforge.llm.router import llm_json
from mindforge.llm.schemas import NextAction
from mindforge.tools.registry import register

# Only the opening steps matter for what to do in the next 24-48 hours
LEADING_STEPS = 3


@register("determine_next_action")
async def determine_next_action(gateway: Gateway, state: AgentState) -> NextAction:
    leading = state.steps.action_steps[:LEADING_STEPS]
    steps = "\n".join(f"{s.step_number}. {s.title}: {s.description}" for s in leading)
    user = NEXT_ACTION_USER.format(priority=state.goal_input.priority, steps=steps)
    raw = await llm_json(gateway, NEXT_ACTION_SYSTEM, user)
    return validate_next_action(raw)
