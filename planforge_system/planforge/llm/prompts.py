import re

PLAN_SCHEMA = """{
  "id": "unique-id",
  "goal": "user's goal",
  "timeline": "user's timeline",
  "totalEstimatedTime": "total estimated time",
  "phases": [
    {
      "id": "phase-id",
      "title": "Phase Title",
      "description": "Phase description",
      "estimatedDuration": "duration",
      "tasks": [
        {
          "id": "task-id",
          "title": "Task Title",
          "description": "Detailed task description",
          "estimatedTime": "time estimate",
          "priority": "high" | "medium" | "low",
          "dependencies": ["task-ids that must be completed first"]
        }
      ]
    }
  ],
  "createdAt": "current ISO date"
}"""


PLANNER_SYSTEM = """You are an expert project manager and strategic planner. Your task is to create comprehensive, actionable project plans that break down complex goals into manageable phases and tasks.

Generate a detailed project plan as a JSON object matching exactly this schema:
{schema}

Guidelines:
- Create 3-6 logical phases depending on complexity
- Each phase should have 3-8 actionable tasks
- Tasks should be specific, measurable, and realistic
- Include time estimates that add up logically
- Assign realistic priorities based on dependencies and importance
- Consider the user's timeline when estimating durations
- Make descriptions clear and actionable
- Use professional project management terminology

Detail Level Guidelines:
- Basic: High-level phases with essential tasks only
- Detailed: Comprehensive breakdown with most necessary tasks
- Comprehensive: Complete roadmap with all possible tasks and considerations

Create a {detail_level} project plan for:
Goal: {goal}
Timeline: {timeline}
Focus: {detail_focus}

Return only the JSON object, no additional text or formatting."""


DETAIL_FOCUS = {
    "basic": "essential tasks only",
    "detailed": "a comprehensive breakdown of the necessary tasks",
    "comprehensive": "an exhaustive roadmap covering all tasks and considerations",
}


_FIELD = re.compile(r"\{(schema|detail_level|detail_focus|goal|timeline)\}")


def build_prompt(goal: str, timeline: str, detail_level: str) -> str:
    # single pass so braces inside goal/timeline are left alone
    values = {
        "schema": PLAN_SCHEMA,
        "detail_level": detail_level,
        "detail_focus": DETAIL_FOCUS[detail_level],
        "goal": goal,
        "timeline": timeline,
    }
    return _FIELD.sub(lambda m: values[m.group(1)], PLANNER_SYSTEM)
