"""
Validates and normalizes model output into a ProjectPlan.
What it does:
- Parses the extracted JSON candidate
- Checks the minimal structure (goal + phases array)
- Backfills plan id / createdAt from the clock
- Backfills positional phase and task ids
- Builds the immutable ProjectPlan

And, the main purpose:
Turn untyped model text into a plan the caller can trust.
"""


import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from pydantic import ValidationError

from planforge.core.errors import PlanParseError, PlanStructureError
from planforge.core.ids import timestamp_id
from planforge.llm.schemas import ProjectPlan

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(at: datetime) -> str:
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return at.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_plan_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise PlanParseError(text, reason=str(e))


def check_structure(raw: Any, *, require_phases: bool = False) -> None:
    if not isinstance(raw, dict):
        raise PlanStructureError(f"plan is not an object (got {type(raw).__name__})")
    if not raw.get("goal"):
        raise PlanStructureError("missing goal")
    if not isinstance(raw.get("phases"), list):
        raise PlanStructureError("phases is not an array")
    if require_phases and not raw["phases"]:
        raise PlanStructureError("phases is empty")
    for i, phase in enumerate(raw["phases"]):
        if not isinstance(phase, dict):
            raise PlanStructureError(f"phase {i + 1} is not an object")
        if not isinstance(phase.get("tasks"), list):
            raise PlanStructureError(f"phase {i + 1} tasks is not an array")
        for j, task in enumerate(phase["tasks"]):
            if not isinstance(task, dict):
                raise PlanStructureError(f"task {i + 1}-{j + 1} is not an object")


def backfill(raw: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Copy of raw with missing ids/createdAt filled in. raw is not mutated."""
    plan = dict(raw)
    if not plan.get("id"):
        plan["id"] = timestamp_id("plan", now)
    if not plan.get("createdAt"):
        plan["createdAt"] = _iso(now)

    phases: List[Dict[str, Any]] = []
    for i, phase in enumerate(raw["phases"]):
        phase = dict(phase)
        if not phase.get("id"):
            phase["id"] = f"phase-{i + 1}"
        tasks = []
        for j, task in enumerate(phase["tasks"]):
            task = dict(task)
            if not task.get("id"):
                task["id"] = f"task-{i + 1}-{j + 1}"
            tasks.append(task)
        phase["tasks"] = tasks
        phases.append(phase)
    plan["phases"] = phases
    return plan


def normalize(text: str, *, now: Clock = utcnow, require_phases: bool = False) -> ProjectPlan:
    raw = parse_plan_json(text)
    check_structure(raw, require_phases=require_phases)
    filled = backfill(raw, now())
    try:
        return ProjectPlan.model_validate(filled)
    except ValidationError as e:
        raise PlanStructureError(f"{e.error_count()} schema error(s): {e.errors()[0]['msg']}")
