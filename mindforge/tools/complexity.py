from mindforge.agent.state import AgentState
from mindforge.agent.validator import validate_goal_analysis
from mindforge.llm.gateway import Gateway
from mindforge.llm.prompts import COMPLEXITY_SYSTEM, COMPLEXITY_USER
from mindforge.llm.router import llm_json
from mindforge.llm.schemas import GoalAnalysis
from mindforge.tools.registry import register


"""
Complexity analysis tool.

What it does:
- Summarizes and categorizes the goal
- Buckets it as simple / moderate / complex (a hint for later steps)
Main purpose:
First step of the pipeline.
"""

@register("analyze_complexity")
async def analyze_complexity(gateway: Gateway, state: AgentState) -> GoalAnalysis:
    goal = state.goal_input
    user = COMPLEXITY_USER.format(goal=goal.goal, priority=goal.priority)
    raw = await llm_json(gateway, COMPLEXITY_SYSTEM, user)
    return validate_goal_analysis(raw)
