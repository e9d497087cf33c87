"""
Retryable client for the chat-completion gateway (OpenRouter).
What it does:
- Sends ONE chat-completion request per call
- Retries rate limits, server errors and network failures with exponential backoff
- Fails immediately on other client errors
- Extracts choices[0].message.content

Main purpose:
The only place that talks HTTP to the model provider.
"""


import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol

import httpx

from mindforge.core.errors import AgentError, GatewayError
from mindforge.core.logging import get_logger

log = get_logger("llm.gateway")

Sleep = Callable[[float], Awaitable[None]]


class Outcome(str, Enum):
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget plus backoff; delays are in seconds."""

    max_attempts: int = 3
    base_delay: float = 1.0

    def classify(self, status_code: int) -> Outcome:
        if 200 <= status_code < 300:
            return Outcome.SUCCESS
        if status_code == 429:
            return Outcome.RATE_LIMITED
        if 400 <= status_code < 500:
            return Outcome.CLIENT_ERROR
        # 5xx and anything unexpected (1xx/3xx) are treated as transient
        return Outcome.SERVER_ERROR

    def delay(self, attempt: int, outcome: Outcome = Outcome.SERVER_ERROR) -> float:
        backoff = self.base_delay * (2**attempt)
        if outcome is Outcome.RATE_LIMITED:
            return backoff * 2
        return backoff

    def should_retry(self, outcome: Outcome) -> bool:
        return outcome in (Outcome.RATE_LIMITED, Outcome.SERVER_ERROR, Outcome.NETWORK_ERROR)


class Gateway(Protocol):
    async def chat(self, system: str, user: str) -> str: ...


def _safe_snippet(text: str, n: int = 400) -> str:
    return (text or "")[:n].replace("\n", "\\n").replace("\r", "\\r")


class GatewayClient:
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        headers: dict[str, str] | None = None,
        policy: RetryPolicy | None = None,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.headers = {"Authorization": f"Bearer {api_key}", **(headers or {})}
        self.policy = policy or RetryPolicy()
        self.timeout = timeout or httpx.Timeout(40.0, connect=10.0)
        self.transport = transport
        self.sleep = sleep

    def build_payload(self, system: str, user: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    async def send(self, payload: dict[str, Any]) -> httpx.Response:
        policy = self.policy
        last_err: Exception | None = None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(policy.max_attempts):
                is_last = attempt + 1 >= policy.max_attempts
                log.info(f"Attempt {attempt + 1}/{policy.max_attempts}")
                try:
                    r = await client.post(self.url, headers=self.headers, json=payload)
                except httpx.TransportError as e:
                    outcome = Outcome.NETWORK_ERROR
                    last_err = GatewayError(f"Gateway request failed: {e.__class__.__name__}: {e}")
                    last_err.__cause__ = e
                else:
                    outcome = policy.classify(r.status_code)
                    if outcome is Outcome.SUCCESS:
                        return r
                    last_err = GatewayError(
                        f"API error {r.status_code}: {_safe_snippet(r.text)}", status_code=r.status_code
                    )
                    if not policy.should_retry(outcome):
                        log.error(f"Non-retryable gateway response {r.status_code}")
                        raise last_err

                if is_last:
                    break
                backoff = policy.delay(attempt, outcome)
                log.warning(f"{last_err}. retrying in {backoff:.1f}s (attempt {attempt + 1}/{policy.max_attempts})")
                await self.sleep(backoff)

        log.error(f"Gateway call failed after {policy.max_attempts} attempts: {last_err}")
        raise last_err or GatewayError("Max retries exceeded")

    async def chat(self, system: str, user: str) -> str:
        r = await self.send(self.build_payload(system, user))
        try:
            data = r.json()
        except ValueError as e:
            raise GatewayError(f"Gateway returned non-JSON body: {_safe_snippet(r.text)}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            log.error(f"No content in response: {_safe_snippet(str(data))}")
            raise AgentError("No content in AI response")
        return content
