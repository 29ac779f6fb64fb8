"""
Error taxonomy for plan generation and it defines:
- One exception per failure kind
- HTTP status + machine-readable code per kind
- Sanitized public message/details (raw model text stays in logs)

The main purpose:
Every failure ends as a structured error response, never an unhandled exception.
"""


from typing import Optional


GENERIC_FAILURE = "Failed to generate project plan"
INVALID_PLAN = "Failed to generate valid plan structure"


class PlanGenerationError(RuntimeError):
    status_code = 500
    code = "internal"
    message = GENERIC_FAILURE

    def __init__(self, details: Optional[str] = None, *, message: Optional[str] = None):
        if message is not None:
            self.message = message
        self.details = details
        super().__init__(f"{self.message}: {details}" if details else self.message)

    def to_payload(self) -> dict:
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class MissingFieldError(PlanGenerationError):
    status_code = 400
    code = "missing_field"
    message = "Goal and timeline are required"


class InvalidRequestError(PlanGenerationError):
    status_code = 400
    code = "invalid_request"
    message = "Invalid request"


class UpstreamConfigError(PlanGenerationError):
    code = "upstream_config"
    message = "Gemini API key not configured"


class TransportError(PlanGenerationError):
    code = "transport"


class UpstreamTimeoutError(TransportError):
    code = "upstream_timeout"


class MalformedUpstreamResponse(PlanGenerationError):
    code = "malformed_upstream"


class PlanParseError(PlanGenerationError):
    code = "plan_parse"
    message = INVALID_PLAN

    def __init__(self, raw_text: str, reason: str = ""):
        super().__init__("The AI response could not be parsed as valid JSON")
        self.raw_text = raw_text
        self.reason = reason


class PlanStructureError(PlanGenerationError):
    code = "plan_structure"
    message = INVALID_PLAN

    def __init__(self, reason: str):
        super().__init__("The AI response did not match the expected plan structure")
        self.reason = reason
