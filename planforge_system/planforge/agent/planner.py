"""
Creates the project plan.
What it does:
- Validates the inbound request (goal, timeline, detail level)
- Checks the model credential before any call
- Builds the prompt and calls the model once (fail-fast)
- Extracts, validates and backfills the plan JSON
- Maps every failure to a tagged error result

And, the main purpose:
Convert a goal + timeline into a ProjectPlan or an explicit failure.
"""


from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from planforge.agent.normalizer import Clock, normalize, utcnow
from planforge.core.config import Settings, settings as default_settings
from planforge.core.errors import (
    InvalidRequestError,
    MissingFieldError,
    PlanGenerationError,
    PlanParseError,
    PlanStructureError,
    UpstreamConfigError,
)
from planforge.core.ids import new_id
from planforge.core.logging import get_logger, safe_snippet
from planforge.llm.json_parse import get_extractor
from planforge.llm.prompts import build_prompt
from planforge.llm.router import get_invoker
from planforge.llm.schemas import DETAIL_LEVELS, PlanRequest, ProjectPlan

log = get_logger("agent.planner")


@dataclass(frozen=True)
class PlanSuccess:
    plan: ProjectPlan
    status_code: int = 200

    def body(self) -> dict:
        return self.plan.to_response()


@dataclass(frozen=True)
class PlanFailure:
    error: PlanGenerationError

    @property
    def status_code(self) -> int:
        return self.error.status_code

    def body(self) -> dict:
        return self.error.to_payload()


PlanResult = Union[PlanSuccess, PlanFailure]


def parse_request(payload: Any) -> PlanRequest:
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    goal = payload.get("goal")
    timeline = payload.get("timeline")
    goal = goal.strip() if isinstance(goal, str) else ""
    timeline = timeline.strip() if isinstance(timeline, str) else ""
    if not goal or not timeline:
        raise MissingFieldError()

    detail_level = payload.get("detailLevel") or "detailed"
    if detail_level not in DETAIL_LEVELS:
        raise InvalidRequestError(f"detailLevel must be one of: {', '.join(DETAIL_LEVELS)}")

    try:
        return PlanRequest(goal=goal, timeline=timeline, detailLevel=detail_level)
    except ValidationError as e:
        raise InvalidRequestError(e.errors()[0]["msg"])


class PlanHandler:
    def __init__(
        self,
        invoker: Any = None,
        *,
        config: Optional[Settings] = None,
        now: Clock = utcnow,
        extractor: Optional[Callable[[str], str]] = None,
    ):
        self.config = config or default_settings
        self.invoker = invoker
        self.now = now
        self.extract = extractor

    def resolve(self) -> None:
        """Pick invoker/extractor from config; a bad setting is a config error, not a crash."""
        if self.invoker is None:
            try:
                self.invoker = get_invoker(self.config)
            except ValueError as e:
                log.error(f"model provider misconfigured: {e}")
                raise UpstreamConfigError("Unsupported model provider", message="Model provider not configured")
        if self.extract is None:
            try:
                self.extract = get_extractor(self.config.JSON_EXTRACTION)
            except KeyError as e:
                log.error(f"JSON extraction misconfigured: {e}")
                raise UpstreamConfigError("Unsupported JSON extraction mode", message="Plan extraction not configured")

    async def handle(self, payload: Any) -> PlanResult:
        request_id = new_id("req")
        try:
            plan = await self._generate(request_id, payload)
        except PlanGenerationError as e:
            self._log_failure(request_id, e)
            return PlanFailure(e)
        except Exception as e:
            log.exception(f"{request_id} unexpected error generating plan: {e!r}")
            return PlanFailure(PlanGenerationError("Unknown error occurred"))
        return PlanSuccess(plan)

    async def _generate(self, request_id: str, payload: Any) -> ProjectPlan:
        req = parse_request(payload)
        self.resolve()

        if not getattr(self.invoker, "configured", False):
            raise UpstreamConfigError()

        log.info(f"{request_id} generating {req.detail_level} plan (goal={safe_snippet(req.goal, 80)!r})")
        prompt = build_prompt(req.goal, req.timeline, req.detail_level)
        raw_text = await self.invoker.invoke(prompt)

        candidate = self.extract(raw_text)
        try:
            plan = normalize(candidate, now=self.now, require_phases=self.config.REQUIRE_PHASES)
        except (PlanParseError, PlanStructureError):
            log.error(f"{request_id} raw model response: {safe_snippet(raw_text, 2000)}")
            raise

        log.info(f"{request_id} plan {plan.id} ready: {len(plan.phases)} phase(s)")
        return plan

    @staticmethod
    def _log_failure(request_id: str, e: PlanGenerationError) -> None:
        reason = getattr(e, "reason", "") or e.details or ""
        if e.status_code < 500:
            log.warning(f"{request_id} rejected [{e.code}]: {e.message}")
        else:
            log.error(f"{request_id} failed [{e.code}]: {e.message} ({reason})")
