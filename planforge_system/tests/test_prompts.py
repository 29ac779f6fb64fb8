import pytest

from planforge.llm.prompts import build_prompt


@pytest.mark.parametrize("detail_level", ["basic", "detailed", "comprehensive"])
def test_prompt_embeds_goal_timeline_and_detail_level(detail_level):
    prompt = build_prompt("Launch a podcast", "6 weeks", detail_level)

    assert "Goal: Launch a podcast" in prompt
    assert "Timeline: 6 weeks" in prompt
    assert f"Create a {detail_level} project plan for:" in prompt


def test_prompt_describes_schema_and_guidelines():
    prompt = build_prompt("Learn Spanish", "1 year", "basic")

    for field in ("totalEstimatedTime", "estimatedDuration", "estimatedTime", "dependencies", "createdAt"):
        assert f'"{field}"' in prompt
    assert '"high" | "medium" | "low"' in prompt
    assert "3-6 logical phases" in prompt
    assert "3-8 actionable tasks" in prompt
    assert "add up logically" in prompt
    assert prompt.rstrip().endswith("Return only the JSON object, no additional text or formatting.")


def test_prompt_focus_follows_detail_level():
    assert "essential tasks only" in build_prompt("g", "t", "basic").split("Focus:")[1]
    assert "exhaustive roadmap" in build_prompt("g", "t", "comprehensive").split("Focus:")[1]


def test_prompt_is_deterministic_and_keeps_braces_in_input():
    goal = "Ship {timeline} parser for {goal} strings"
    first = build_prompt(goal, "2 months", "detailed")

    assert first == build_prompt(goal, "2 months", "detailed")
    assert f"Goal: {goal}" in first
    assert "Timeline: 2 months" in first
