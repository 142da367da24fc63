"""
Prompt for the plan content generator
"""

from studyplan_api.ai.models import GoalBrief

SYSTEM_PROMPT = "You are a study planner. Reply with valid JSON only."


def build_plan_prompt(goal: GoalBrief, total_weeks: int) -> str:
    """Build the user prompt asking for a week-by-week plan as JSON."""
    milestones = "\n".join(f"- {m}" for m in goal.milestones) or "None"
    key_results = "\n".join(f"- {k}" for k in goal.key_results) or "None"

    return f"""Create a {total_weeks}-week study plan for this goal.

## Goal
- Title: {goal.title}
- Description: {goal.description or "None"}
- Start date: {goal.start_date.isoformat()}
- Target date: {goal.target_date.isoformat()}

## Milestones
{milestones}

## Key results
{key_results}

Keep 3-5 concrete, measurable tasks per week. Every task needs a quantity,
a duration such as "30分钟" or "1.5小时", and a difficulty of easy, medium or hard.

Return JSON with this structure:
{{
  "title": "plan title",
  "description": "plan description",
  "totalWeeks": {total_weeks},
  "weeklyPlans": [
    {{
      "weekNumber": 1,
      "milestones": ["milestone"],
      "taskCount": 4,
      "estimatedHours": 6,
      "tasks": [
        {{"title": "task", "description": "what to do", "quantity": "20 words",
          "duration": "30分钟", "difficulty": "easy"}}
      ]
    }}
  ],
  "resources": [
    {{"title": "resource", "type": "video", "url": "", "description": ""}}
  ]
}}"""
