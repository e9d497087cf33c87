"""
Error types shared by every layer.

Two kinds reach the HTTP surface:
- ValidationError: field-attributed, caused by the client input (400)
- AgentError: everything else (500)
"""


class AgentError(RuntimeError):
    retryable = True

    def __init__(self, message: str, *, step: str | None = None):
        super().__init__(message)
        self.message = message
        self.step = step


class ConfigurationError(AgentError):
    retryable = False


class GatewayError(AgentError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
        # 4xx other than 429 will not change on a second try
        if status_code is not None and 400 <= status_code < 500 and status_code != 429:
            self.retryable = False


class ResponseParseError(AgentError):
    pass


class ValidationError(ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
