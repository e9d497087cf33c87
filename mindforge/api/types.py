"""
API response schemas for failures.
What it defines:
- VALIDATION_ERROR body (400)
- AGENT_ERROR body (500)

The success body is llm.schemas.AgentResponse.

And, the main purpose:
Ensure structured communication between client and server.
"""


from typing import Literal, Optional

from pydantic import BaseModel

class ValidationErrorBody(BaseModel):
    code: Literal["VALIDATION_ERROR"] = "VALIDATION_ERROR"
    message: str
    field: str

class AgentErrorBody(BaseModel):
    code: Literal["AGENT_ERROR"] = "AGENT_ERROR"
    message: str
    details: Optional[str] = None
