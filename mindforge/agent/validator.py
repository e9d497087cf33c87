"""
Schema validator for every boundary-crossing value.
What it does:
- Checks untyped data (HTTP body, LLM fragments) against the pydantic entities
- Converts pydantic errors into a single field-attributed ValidationError
- Reports the first failing path as dotted/indexed text, e.g. actionSteps[2].title

And, the main purpose:
Nothing past this module assumes a shape that was not checked.
"""


from typing import Any, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from mindforge.core.errors import ValidationError
from mindforge.llm.schemas import (
    AgentResponse,
    GoalAnalysis,
    GoalInput,
    NextAction,
    RisksFragment,
    StepsFragment,
)

E = TypeVar("E")


def format_loc(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def validate_entity(model: Type[E], data: Any, *, root: str = "value") -> E:
    if not isinstance(data, dict):
        raise ValidationError(root, f"Expected an object for {model.__name__}, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = format_loc(first["loc"]) or root
        raise ValidationError(field, first["msg"]) from e


def validate_goal_input(data: Any) -> GoalInput:
    return validate_entity(GoalInput, data, root="body")


def validate_goal_analysis(data: Any) -> GoalAnalysis:
    return validate_entity(GoalAnalysis, data, root="goalAnalysis")


def validate_steps(data: Any) -> StepsFragment:
    return validate_entity(StepsFragment, data, root="actionSteps")


def validate_risks(data: Any) -> RisksFragment:
    return validate_entity(RisksFragment, data, root="risks")


def validate_next_action(data: Any) -> NextAction:
    return validate_entity(NextAction, data, root="nextImmediateAction")


def validate_agent_response(data: Any) -> AgentResponse:
    return validate_entity(AgentResponse, data, root="response")
