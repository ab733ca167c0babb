"""Prompt builders for the content model.

Each builder returns the chat ``messages`` list for one request type.
"""

from typing import Iterable

from ..models.enums import LessonType

LESSON_JSON_EXAMPLE = """
{
  "title": "Project: Bouncing Ball",
  "difficulty": "Beginner",
  "objective": "Apply variables and conditionals",
  "description": "Build a ball that bounces off all four walls.",
  "theory": "In this test, you will use what you learned about **Velocity** and **If Statements**.",
  "steps": [
    "Create variables for x, y, xSpeed, and ySpeed.",
    "Initialize the variables in setup().",
    "In draw(), move the ball by adding speed to position.",
    "Add boundary checks: if x > width, reverse xSpeed."
  ],
  "starterCode": "let x, y;\\n\\nfunction setup() {\\n  createCanvas(400, 400);\\n}\\n\\nfunction draw() {\\n  background(220);\\n}",
  "challenge": "Make the ball change color every time it hits a wall!",
  "tags": ["animation", "variables", "logic"]
}
"""

CURRICULUM_JSON_SHAPE = """
{
  "courseTitle": "string",
  "description": "string",
  "units": [{"title": "string", "description": "string", "order": number}],
  "lessons": [
    {
      "unitIndex": number,
      "title": "string",
      "topic": "string",
      "objective": "string",
      "difficulty": "Beginner" | "Intermediate" | "Advanced",
      "description": "string (1 sentence)",
      "theory": "string (markdown)",
      "steps": ["4-5 guided steps"],
      "starterCode": "string (working p5.js code)",
      "challenge": "string",
      "tags": ["2-4 lowercase tags"]
    }
  ]
}
"""

DURATION_GUIDANCE = {
    "Workshop": "2-3 units with 2-3 lessons each (total 6-8 lessons)",
    "Month": "4-5 units with 3-4 lessons each (total 12-16 lessons)",
}
SEMESTER_GUIDANCE = "8-10 units with 3-5 lessons each (total 30-40 lessons)"


def duration_guidance(duration: str) -> str:
    """Anything other than Workshop or Month is treated as a semester."""
    return DURATION_GUIDANCE.get(duration, SEMESTER_GUIDANCE)


def _messages(system: str, user: str) -> list[dict]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def lesson_plan_messages(topic: str, level: str, lesson_type: LessonType, previous_context: str = "") -> list[dict]:
    if lesson_type == LessonType.lesson:
        type_prompt = (
            "This is an INTERACTIVE LESSON that teaches a new concept through discovery.\n"
            "Starter code works but leaves small parts for the student to change.\n"
            "Use [NEXT] for observation steps and [TEXT] for understanding checks.\n"
            "Code tasks read like \"Change X to Y\" or \"Uncomment this line\"."
        )
    else:
        type_prompt = (
            "This is a CODING ASSIGNMENT that tests how well the student applies concepts.\n"
            f"The student has already learned:\n{previous_context or 'General p5.js concepts for this level.'}\n"
            "Starter code is a minimal skeleton and must not contain the solution.\n"
            "Steps are high-level requirements only; never spell out the syntax."
        )
    system = (
        "You are a Computer Science teacher creating content for 5th graders.\n"
        f"RETURN ONLY JSON. No markdown. Structure example:\n{LESSON_JSON_EXAMPLE}"
    )
    user = (
        f"Create a p5.js {lesson_type.value}. Topic: \"{topic}\". Level: \"{level}\".\n"
        f"{type_prompt}\n\n"
        "1. Audience: 10-year-olds. Simple, fun language.\n"
        "2. Starter code uses \\n for newlines and includes comments.\n"
        "3. Tags: 3-5 concepts."
    )
    return _messages(system, user)


def code_analysis_messages(code: str, objective: str) -> list[dict]:
    system = (
        "You are a helpful coding buddy for kids. Never give the student the answer "
        "and never write code in the hint. Point to the logic error or the line number.\n"
        'RETURN ONLY JSON: {"isCorrect": boolean, "hint": "string", "encouragement": "string"}'
    )
    user = f"Analyze this p5.js code. Objective: \"{objective}\".\n\nCode:\n{code}"
    return _messages(system, user)


def step_validation_messages(student_input: str, instruction: str) -> list[dict]:
    system = (
        "You are a kind but accurate judge for 10-year-olds.\n"
        'RETURN ONLY JSON: {"passed": boolean, "feedback": "string"}'
    )
    user = (
        f"Check if input follows instruction: \"{instruction}\"\n\nInput:\n{student_input}\n\n"
        "- If the instruction starts with [TEXT], check that the answer is reasonable.\n"
        "- If the instruction is [NEXT], passed=true.\n"
        "- If it is code, check the logic.\n"
        "If it failed, never provide the correct code; say what looks missing instead."
    )
    return _messages(system, user)


def error_explanation_messages(error: str, code: str) -> list[dict]:
    system = (
        "You are a helpful coding tutor for kids. Keep explanations to 1-2 sentences. "
        "Do not fix the code; explain why it broke."
    )
    user = f"Explain this p5.js console error to a 10-year-old.\n\nError: \"{error}\"\nCode:\n{code}"
    return _messages(system, user)


def summarize_lessons(lessons: Iterable) -> str:
    return "\n".join(
        f"- {lesson.title} ({lesson.difficulty.value}): {lesson.objective} [Tags: {', '.join(lesson.tags)}]"
        for lesson in lessons
    )


def curriculum_suggestion_messages(lessons: Iterable) -> list[dict]:
    system = (
        "You are a Curriculum Director for a p5.js coding school. Analyze the existing "
        "lessons and suggest 3 logical next topics, filling gaps in what is already taught.\n"
        'RETURN ONLY JSON: {"suggestions": [{"topic": "string", "reason": "string", '
        '"difficulty": "Beginner" | "Intermediate" | "Advanced"}]}'
    )
    summary = summarize_lessons(lessons)
    user = f"Here is the current curriculum:\n{summary or 'No lessons yet. Suggest 3 beginner topics.'}"
    return _messages(system, user)


def full_curriculum_messages(theme: str, duration: str) -> list[dict]:
    system = (
        "You are an expert p5.js curriculum designer for 10-12 year olds.\n"
        f"RETURN ONLY VALID JSON. Structure:\n{CURRICULUM_JSON_SHAPE}"
    )
    user = (
        f"Create a p5.js coding curriculum with theme: \"{theme}\"\n\n"
        f"DURATION: {duration} ({duration_guidance(duration)})\n\n"
        "Theory is markdown with bold headings and short explanations.\n"
        "Steps start with a [NEXT] observation, include a [TEXT] question and build to coding tasks.\n"
        "Starter code has setup() and draw(), comments, and draws something visible.\n"
        "Progress from shapes and colors to interaction, then animation, then creative projects.\n"
        f"Every lesson must relate to \"{theme}\"."
    )
    return _messages(system, user)
