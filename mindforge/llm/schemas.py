from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high", "critical"]
Complexity = Literal["simple", "moderate", "complex"]
Severity = Literal["low", "medium", "high"]


class Entity(BaseModel):
    # camelCase on the wire (aliases only), frozen once validated
    model_config = ConfigDict(
        alias_generator=to_camel,
        frozen=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class GoalInput(Entity):
    goal: str = Field(..., max_length=1000)
    priority: Priority
    time_available: Optional[str] = None

    @field_validator("goal")
    @classmethod
    def _goal_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Goal is required and must be a non-empty string")
        return v


class GoalAnalysis(Entity):
    summary: str = Field(..., min_length=10)
    category: str = Field(..., min_length=1)
    complexity: Complexity


class ActionStep(Entity):
    step_number: int = Field(..., gt=0, strict=True)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    estimated_time: str
    dependencies: List[str]


class StepsFragment(Entity):
    action_steps: List[ActionStep] = Field(..., min_length=1)
    total_estimated_time: str


class Risk(Entity):
    id: str
    title: str = Field(..., min_length=1)
    severity: Severity
    mitigation: str = Field(..., min_length=1)


class RisksFragment(Entity):
    risks: List[Risk]


class NextAction(Entity):
    action: str = Field(..., min_length=1)
    reasoning: str = Field(..., min_length=1)
    timeframe: str = Field(..., min_length=1)


class AgentResponse(Entity):
    goal_analysis: GoalAnalysis
    action_steps: List[ActionStep] = Field(..., min_length=1)
    total_estimated_time: str
    risks: List[Risk]
    next_immediate_action: NextAction
