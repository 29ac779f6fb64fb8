from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional, Tuple

DetailLevel = Literal["basic", "detailed", "comprehensive"]
Priority = Literal["high", "medium", "low"]

DETAIL_LEVELS = ("basic", "detailed", "comprehensive")


class PlanRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    goal: str = Field(..., min_length=1)
    timeline: str = Field(..., min_length=1)
    detail_level: DetailLevel = Field("detailed", alias="detailLevel")


# sequences are tuples so the whole tree is read-only, not just attributes
class _PlanModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)


class ProjectTask(_PlanModel):
    id: str = Field(..., min_length=1)
    title: Optional[str] = None
    description: Optional[str] = None
    estimatedTime: Optional[str] = None
    priority: Optional[Priority] = None
    dependencies: Optional[Tuple[str, ...]] = None

    @field_validator("priority", mode="before")
    @classmethod
    def _lower_priority(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ProjectPhase(_PlanModel):
    id: str = Field(..., min_length=1)
    title: Optional[str] = None
    description: Optional[str] = None
    estimatedDuration: Optional[str] = None
    tasks: Tuple[ProjectTask, ...]


class ProjectPlan(_PlanModel):
    id: str = Field(..., min_length=1)
    goal: str = Field(..., min_length=1)
    timeline: Optional[str] = None
    totalEstimatedTime: Optional[str] = None
    phases: Tuple[ProjectPhase, ...]
    createdAt: str

    def to_response(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


# Export collaborator contract (board creation happens outside this service)
class TrelloExportRequest(BaseModel):
    plan: ProjectPlan
    apiKey: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)


class TrelloBoard(BaseModel):
    id: str
    name: str
    url: str
