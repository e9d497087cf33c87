from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from mindforge.agent.orchestrator import Orchestrator
from mindforge.api.types import AgentErrorBody, ValidationErrorBody
from mindforge.core.config import settings
from mindforge.core.errors import AgentError, ValidationError
from mindforge.core.ids import new_id
from mindforge.core.logging import get_logger
from mindforge.llm.gateway import RetryPolicy
from mindforge.llm.router import build_gateway


"""
FastAPI routes for interacting with the agent.
What it provides:
- POST /analyze-goal: goal in, validated action plan out
- Error mapping: ValidationError -> 400, everything else -> 500

And, the main purpose:
Expose the orchestration pipeline over HTTP.
"""

log = get_logger("api.routes")

OrchestratorFactory = Callable[[str], Orchestrator]


def get_orchestrator_factory() -> OrchestratorFactory:
    def factory(run_id: str) -> Orchestrator:
        return Orchestrator(
            lambda: build_gateway(settings),
            policy=RetryPolicy(max_attempts=settings.STEP_MAX_ATTEMPTS, base_delay=settings.STEP_BASE_DELAY_S),
            run_id=run_id,
        )
    return factory


def _validation_error(e: ValidationError) -> JSONResponse:
    body = ValidationErrorBody(message=e.message, field=e.field)
    return JSONResponse(status_code=400, content=body.model_dump())


def _agent_error(e: Exception) -> JSONResponse:
    message = e.message if isinstance(e, AgentError) else (str(e) or "Unknown error")
    details = f"step={e.step}" if getattr(e, "step", None) else None
    body = AgentErrorBody(message=message, details=details)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


router = APIRouter()
@router.post("/analyze-goal")
async def api_analyze_goal(request: Request, make_orchestrator: OrchestratorFactory = Depends(get_orchestrator_factory)):
    run_id = new_id("run")
    log.info(f"[{run_id}] Starting goal analysis")

    try:
        body = await request.json()
    except ValueError:
        return _validation_error(ValidationError("body", "Request body must be valid JSON"))

    try:
        response = await make_orchestrator(run_id).run(body)
    except ValidationError as e:
        log.warning(f"[{run_id}] Invalid input: {e}")
        return _validation_error(e)
    except Exception as e:
        log.error(f"[{run_id}] Error: {e}")
        return _agent_error(e)

    return JSONResponse(status_code=200, content=response.to_wire())
