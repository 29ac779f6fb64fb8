"""
API response schemas.
What it defines:
- Error payload shape
- Health payload

And, the main purpose:
Document the wire contract of the plan endpoint.
"""


from typing import Optional

from pydantic import BaseModel, Field

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    code: str = Field(..., description="Machine-readable failure kind")

class HealthResponse(BaseModel):
    ok: bool = True
