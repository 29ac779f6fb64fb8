"""Shared fixtures: stub model invokers, frozen clock, Gemini envelopes."""

import json
from datetime import datetime, timezone

import pytest

from planforge.core.config import Settings


FROZEN_AT = datetime(2024, 6, 1, 12, 30, 0, tzinfo=timezone.utc)

HABIT_TRACKER_TEXT = json.dumps(
    {
        "goal": "Build a habit tracker app",
        "timeline": "3 months",
        "totalEstimatedTime": "3 months",
        "phases": [
            {
                "title": "Design",
                "description": "d",
                "estimatedDuration": "2 weeks",
                "tasks": [
                    {
                        "title": "Wireframes",
                        "description": "d",
                        "estimatedTime": "3 days",
                        "priority": "high",
                    }
                ],
            }
        ],
    }
)


class StubInvoker:
    """Returns canned raw text and records every prompt it was given."""

    def __init__(self, text: str = HABIT_TRACKER_TEXT, *, error: Exception | None = None, configured: bool = True):
        self.text = text
        self.error = error
        self.configured = configured
        self.prompts: list[str] = []

    async def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def gemini_envelope(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def frozen_clock():
    return lambda: FROZEN_AT


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {"LLM_PROVIDER": "gemini", "GEMINI_API_KEY": "test-key"}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def stub_invoker():
    return StubInvoker()
