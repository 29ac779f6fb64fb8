"""
LLM call wrapper and it does:
- Sends the plan prompt to Gemini generateContent
- Applies the fixed generation + safety configuration
- Bounds the whole call (retries included) with one deadline
- Optional retry with backoff on transient failures
- Unwraps the candidate text from the response envelope

Main purpose:
Central interface for all model calls.
"""


import asyncio
import json
import re
from typing import Optional

import httpx

from planforge.core.config import Settings
from planforge.core.errors import (
    MalformedUpstreamResponse,
    TransportError,
    UpstreamConfigError,
    UpstreamTimeoutError,
)
from planforge.core.logging import get_logger, safe_snippet

log = get_logger("llm.router")


# Fixed decoding parameters: keep stable so plan shape stays predictable
GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 4096,
}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

TRANSIENT_STATUSES = (429, 500, 502, 503, 504)


def build_payload(prompt: str) -> dict:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": [dict(s) for s in SAFETY_SETTINGS],
    }


def unwrap_candidate_text(data: object) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = parts[0]["text"]
    except (KeyError, IndexError, TypeError):
        raise MalformedUpstreamResponse("Invalid response from Gemini API")
    if not isinstance(text, str):
        raise MalformedUpstreamResponse("Invalid response from Gemini API")
    return text


class _Transient(Exception):
    def __init__(self, error: Exception):
        super().__init__(str(error))
        self.error = error


class ModelInvoker:
    """Gemini client. All configuration is fixed at construction."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        connect_timeout: float = 10.0,
        max_retries: int = 0,
        backoff: float = 0.6,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.max_retries = max(0, max_retries)
        self.backoff = backoff
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ModelInvoker":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            base_url=settings.GEMINI_BASE_URL,
            model=settings.LLM_MODEL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            connect_timeout=settings.LLM_CONNECT_TIMEOUT_SECONDS,
            max_retries=settings.LLM_MAX_RETRIES,
            backoff=settings.LLM_RETRY_BACKOFF_SECONDS,
            **kwargs,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def invoke(self, prompt: str) -> str:
        if not self.configured:
            raise UpstreamConfigError()

        try:
            return await asyncio.wait_for(self._invoke_with_retries(prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise UpstreamTimeoutError(f"Gemini API request timed out after {self.timeout:g}s")

    async def _invoke_with_retries(self, prompt: str) -> str:
        attempts = self.max_retries + 1
        last_err: Exception | None = None
        for attempt in range(attempts):
            try:
                return await self._attempt(prompt)
            except _Transient as t:
                last_err = t.error
                if attempt + 1 < attempts:
                    backoff = self.backoff * (2**attempt)
                    log.warning(f"{t.error}. retrying in {backoff:.1f}s (attempt {attempt+1}/{attempts})")
                    await asyncio.sleep(backoff)

        raise last_err

    async def _attempt(self, prompt: str) -> str:
        try:
            r = await self._post(prompt)
        except httpx.TimeoutException:
            raise _Transient(UpstreamTimeoutError(f"Gemini API request timed out after {self.timeout:g}s"))
        except httpx.HTTPError as e:
            log.error(f"Gemini call failed: {e!r}")
            raise _Transient(TransportError(f"Gemini API error: {type(e).__name__}"))

        if r.status_code >= 400:
            log.error(f"Gemini API error {r.status_code}: {safe_snippet(r.text)}")
            err = TransportError(f"Gemini API error: {r.reason_phrase or r.status_code}")
            if r.status_code in TRANSIENT_STATUSES:
                raise _Transient(err)
            raise err

        try:
            data = r.json()
        except ValueError:
            log.error(f"Gemini returned non-JSON body: {safe_snippet(r.text)}")
            raise MalformedUpstreamResponse("Invalid response from Gemini API")
        return unwrap_candidate_text(data)

    async def _post(self, prompt: str) -> httpx.Response:
        timeout = httpx.Timeout(self.timeout, connect=self.connect_timeout)
        headers = {"x-goog-api-key": self.api_key}
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            return await client.post(self.url, headers=headers, json=build_payload(prompt))


_GOAL_LINE = re.compile(r"^Goal: (.*)$", re.MULTILINE)
_TIMELINE_LINE = re.compile(r"^Timeline: (.*)$", re.MULTILINE)


class MockInvoker:
    """Key-less local development: echoes goal/timeline into a canned plan."""

    configured = True

    async def invoke(self, prompt: str) -> str:
        goal = _GOAL_LINE.search(prompt)
        timeline = _TIMELINE_LINE.search(prompt)
        plan = {
            "goal": goal.group(1) if goal else "Mock goal",
            "timeline": timeline.group(1) if timeline else "",
            "totalEstimatedTime": timeline.group(1) if timeline else "",
            "phases": [
                {
                    "title": "Discovery",
                    "description": "Clarify scope and success criteria.",
                    "estimatedDuration": "1 week",
                    "tasks": [
                        {
                            "title": "Define requirements",
                            "description": "List must-have outcomes.",
                            "estimatedTime": "2 days",
                            "priority": "high",
                        },
                        {
                            "title": "Identify risks",
                            "description": "Capture known blockers.",
                            "estimatedTime": "1 day",
                            "priority": "medium",
                        },
                    ],
                },
                {
                    "title": "Delivery",
                    "description": "Build and ship the first version.",
                    "estimatedDuration": "2 weeks",
                    "tasks": [
                        {
                            "title": "Build",
                            "description": "Implement the core scope.",
                            "estimatedTime": "8 days",
                            "priority": "high",
                            "dependencies": ["task-1-1"],
                        },
                    ],
                },
            ],
        }
        return "Here is your plan:\n```json\n" + json.dumps(plan, ensure_ascii=False) + "\n```"


def get_invoker(settings: Settings, **kwargs):
    provider = (settings.LLM_PROVIDER or "").lower().strip()
    if provider == "mock":
        return MockInvoker()
    if provider != "gemini":
        raise ValueError(f"Unsupported LLM_PROVIDER={settings.LLM_PROVIDER}. Use gemini or mock.")
    return ModelInvoker.from_settings(settings, **kwargs)
