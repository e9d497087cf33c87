"""
Records execution events for one run.
What it records:
- Step starts and completions
- Retries (with the error and the backoff)
- Failures (with the step name)

And, the main purpose:
Observability of the pipeline. Events live on the AgentState only;
nothing is persisted.
"""


from dataclasses import replace
from datetime import datetime, timezone

from mindforge.agent.state import AgentState
from mindforge.core.ids import new_id
from mindforge.core.logging import get_logger

log = get_logger("agent.tracer")


def trace(state: AgentState, step: str, event_type: str, payload: dict | None = None) -> AgentState:
    event = {
        "id": new_id("tr"),
        "run_id": state.run_id,
        "step": step,
        "type": event_type,
        "payload": payload or {},
        "at": datetime.now(timezone.utc).isoformat(),
    }
    log.debug(f"[{state.run_id}] {step}:{event_type} {event['payload']}")
    return replace(state, trace=state.trace + (event,))
