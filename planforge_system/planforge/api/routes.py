"""
FastAPI routes for plan generation.
What it provides:
- Generate plan endpoint
- CORS preflight for the plan endpoint
- Health check

And, the main purpose:
Expose the plan pipeline over HTTP.
"""


import json

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from planforge.agent.planner import PlanFailure, PlanHandler
from planforge.api.types import ErrorResponse, HealthResponse
from planforge.core.config import settings
from planforge.core.errors import InvalidRequestError
from planforge.llm.schemas import ProjectPlan


def cors_headers() -> dict:
    return {
        "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
        "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }


def get_plan_handler() -> PlanHandler:
    return PlanHandler()


router = APIRouter()

@router.options("/generate-plan")
async def api_generate_plan_preflight():
    return Response(status_code=200, headers=cors_headers())

@router.post(
    "/generate-plan",
    response_model=ProjectPlan,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def api_generate_plan(request: Request, handler: PlanHandler = Depends(get_plan_handler)):
    try:
        payload = json.loads(await request.body())
    except ValueError:
        result = PlanFailure(InvalidRequestError("Request body must be valid JSON"))
    else:
        result = await handler.handle(payload)
    return JSONResponse(result.body(), status_code=result.status_code, headers=cors_headers())

@router.get("/health", response_model=HealthResponse)
async def api_health():
    return {"ok": True}
