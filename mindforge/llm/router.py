"""
LLM call wrapper and it does:
- Picks the gateway for the configured provider (openrouter or mock)
- Refuses to build a real gateway without an API key
- Sends prompts and parses the model text into JSON

Main purpose:
Central interface for all model calls.
"""


import json

import httpx

from mindforge.core.config import Settings, settings
from mindforge.core.errors import ConfigurationError
from mindforge.core.logging import get_logger
from mindforge.llm import prompts
from mindforge.llm.gateway import Gateway, GatewayClient, RetryPolicy, _safe_snippet
from mindforge.llm.json_parse import parse_response

log = get_logger("llm.router")


class MockGateway:
    """Offline gateway for LLM_PROVIDER=mock. Answers by tool prompt."""

    RESPONSES = {
        prompts.COMPLEXITY_SYSTEM: {
            "summary": "Mock analysis: the goal is achievable with steady, scheduled practice.",
            "category": "Personal Development",
            "complexity": "moderate",
        },
        prompts.STEPS_SYSTEM: {
            "actionSteps": [
                {
                    "stepNumber": 1,
                    "title": "Define the outcome",
                    "description": "Write down what finishing this goal looks like.",
                    "estimatedTime": "1 hour",
                    "dependencies": [],
                },
                {
                    "stepNumber": 2,
                    "title": "Gather resources",
                    "description": "Collect the materials and tools you will need.",
                    "estimatedTime": "2 hours",
                    "dependencies": ["Define the outcome"],
                },
                {
                    "stepNumber": 3,
                    "title": "Practice on a schedule",
                    "description": "Block recurring time in your calendar and stick to it.",
                    "estimatedTime": "3 weeks",
                    "dependencies": ["Gather resources"],
                },
                {
                    "stepNumber": 4,
                    "title": "Review progress",
                    "description": "Compare results against the outcome and adjust.",
                    "estimatedTime": "1 hour",
                    "dependencies": ["Practice on a schedule"],
                },
            ],
            "totalEstimatedTime": "3-4 weeks",
        },
        prompts.RISKS_SYSTEM: {
            "risks": [
                {
                    "id": "risk_1",
                    "title": "Losing momentum",
                    "severity": "medium",
                    "mitigation": "Track sessions and keep them short enough to be sustainable.",
                },
                {
                    "id": "risk_2",
                    "title": "Unclear finish line",
                    "severity": "low",
                    "mitigation": "Agree on a measurable outcome before starting.",
                },
            ]
        },
        prompts.NEXT_ACTION_SYSTEM: {
            "action": "Write a one-paragraph description of the finished goal.",
            "reasoning": "Every later step depends on a clear outcome.",
            "timeframe": "Today",
        },
    }

    async def chat(self, system: str, user: str) -> str:
        return json.dumps(self.RESPONSES[system])


def build_gateway(cfg: Settings = settings) -> Gateway:
    provider = (cfg.LLM_PROVIDER or "").lower().strip()

    if provider == "mock":
        return MockGateway()

    if provider != "openrouter":
        raise ConfigurationError(f"Unsupported LLM_PROVIDER={cfg.LLM_PROVIDER}. Use openrouter or mock.")

    if not cfg.OPENROUTER_API_KEY:
        log.error("OPENROUTER_API_KEY not configured")
        raise ConfigurationError("OpenRouter API key is not configured")

    return GatewayClient(
        api_key=cfg.OPENROUTER_API_KEY,
        base_url=cfg.OPENROUTER_BASE_URL,
        model=cfg.LLM_MODEL,
        temperature=cfg.LLM_TEMPERATURE,
        max_tokens=cfg.LLM_MAX_TOKENS,
        headers={"HTTP-Referer": cfg.APP_REFERER, "X-Title": cfg.APP_TITLE},
        policy=RetryPolicy(max_attempts=cfg.GATEWAY_MAX_ATTEMPTS, base_delay=cfg.GATEWAY_BASE_DELAY_S),
        timeout=httpx.Timeout(cfg.LLM_TIMEOUT_S, connect=cfg.LLM_CONNECT_TIMEOUT_S),
    )


async def llm_json(gateway: Gateway, system: str, user: str):
    """
    Calls the gateway once and returns the parsed JSON value.
    Raises ResponseParseError if the text is not JSON (after fence stripping).
    """
    text = await gateway.chat(system, user)
    try:
        return parse_response(text)
    except Exception:
        log.warning(f"JSON parse failed. Snippet={_safe_snippet(text)}")
        raise
