"""Built-in curriculum templates that can be applied to a class."""

from typing import Optional

from pydantic import Field

from ..ai.schemas import CurriculumLessonRequest, CurriculumUnitRequest, FullCurriculumResponse
from ..schemas.base import CamelModel


class CurriculumTemplate(CamelModel):
    id: str
    name: str
    level: str
    theme: str
    duration: str
    description: str
    goals: list[str] = Field(default_factory=list)
    units: list[CurriculumUnitRequest]
    lessons: list[CurriculumLessonRequest]

    def to_curriculum(self) -> FullCurriculumResponse:
        return FullCurriculumResponse(
            course_title=self.name,
            description=self.description,
            units=self.units,
            lessons=self.lessons,
        )


_SETUP = "function setup() {\n  createCanvas(400, 400);\n}\n\n"

_CATALOG = [
    {
        "id": "beginner-creative",
        "name": "Creative Coding Foundations",
        "level": "Beginner (Grades 5-6)",
        "theme": "Art and Animation",
        "duration": "Semester",
        "description": "Perfect first course: shapes, colors, animation basics through creative projects",
        "goals": ["Basic shapes & coordinates", "Color theory", "Simple animations", "Mouse interaction"],
        "units": [
            {"title": "Drawing Basics", "description": "Learn to draw shapes and use the coordinate system", "order": 0},
            {"title": "Colors & Patterns", "description": "Explore color theory and create beautiful patterns", "order": 1},
            {"title": "Movement & Animation", "description": "Make things move and animate on screen", "order": 2},
            {"title": "Interactive Art", "description": "Create art that responds to mouse and keyboard", "order": 3},
        ],
        "lessons": [
            {
                "unitIndex": 0,
                "title": "Your First Canvas",
                "topic": "Setup & Canvas",
                "objective": "Create a canvas and understand coordinates",
                "difficulty": "Beginner",
                "description": "Learn how to create your first p5.js canvas and understand the coordinate system",
                "theory": (
                    "**Welcome to p5.js!**\n\nThink of the canvas like a piece of graph paper:\n"
                    "- **X** goes left-to-right\n- **Y** goes up-and-down\n- The top-left corner is (0, 0)"
                ),
                "steps": [
                    "[NEXT] Look at the code. What do you see in setup()?",
                    "[TEXT] What do the two numbers in createCanvas() mean?",
                    "Change the canvas size to 600 by 600",
                    "Try making it really wide: 800 by 200",
                ],
                "starterCode": _SETUP + "function draw() {\n  background(220);\n}",
                "challenge": "Make a canvas that is 500 pixels wide and 300 pixels tall",
                "tags": ["canvas", "setup", "coordinates"],
            },
            {
                "unitIndex": 0,
                "title": "Drawing Shapes",
                "topic": "Basic Shapes",
                "objective": "Use rect(), ellipse(), and triangle()",
                "difficulty": "Beginner",
                "description": "Draw rectangles, circles, and triangles on your canvas",
                "theory": (
                    "**Basic Shapes in p5.js**\n\n- `rect(x, y, width, height)`\n"
                    "- `ellipse(x, y, width, height)`\n- `triangle(x1, y1, x2, y2, x3, y3)`"
                ),
                "steps": [
                    "[NEXT] Run the code and see the square",
                    "Add an ellipse at position (300, 200) with size 100, 100",
                    "Draw a triangle using three points",
                    "[TEXT] What happens if you change the rect() numbers?",
                ],
                "starterCode": _SETUP + "function draw() {\n  background(220);\n  rect(150, 150, 100, 100);\n}",
                "challenge": "Draw a house using rectangles for the walls and a triangle for the roof!",
                "tags": ["shapes", "rect", "ellipse", "triangle"],
            },
            {
                "unitIndex": 1,
                "title": "Mixing Colors",
                "topic": "RGB Color",
                "objective": "Use fill() with red, green and blue values",
                "difficulty": "Beginner",
                "description": "Color your shapes by mixing red, green and blue",
                "theory": "**RGB Color System**\n\nComputers mix colors using three values from 0 to 255.",
                "steps": [
                    "[NEXT] See the red circle",
                    "[TEXT] What color is (0, 255, 0)?",
                    "Change the circle to blue",
                    "Try mixing red and green to make yellow",
                ],
                "starterCode": _SETUP + "function draw() {\n  background(220);\n  fill(255, 0, 0);\n  ellipse(200, 200, 100, 100);\n}",
                "challenge": "Create a traffic light with red, yellow, and green circles!",
                "tags": ["color", "fill", "rgb"],
            },
            {
                "unitIndex": 2,
                "title": "Moving Circle",
                "topic": "Variables & Motion",
                "objective": "Use a variable to animate a shape",
                "difficulty": "Beginner",
                "description": "Make a circle glide across the screen",
                "theory": "**Variables Remember Things**\n\n`let x = 0;` stores a number. Add to it in draw() and the shape moves.",
                "steps": [
                    "[NEXT] Watch the circle move",
                    "Make it move faster by adding 3 instead of 1",
                    "[TEXT] Why does the circle disappear on the right?",
                    "Reset x to 0 when it reaches the edge",
                ],
                "starterCode": "let x = 0;\n\n" + _SETUP + "function draw() {\n  background(220);\n  ellipse(x, 200, 50, 50);\n  x = x + 1;\n}",
                "challenge": "Make the circle move diagonally!",
                "tags": ["variables", "animation"],
            },
            {
                "unitIndex": 3,
                "title": "Follow the Mouse",
                "topic": "Mouse Interaction",
                "objective": "Use mouseX and mouseY to draw",
                "difficulty": "Beginner",
                "description": "Draw shapes that follow your mouse",
                "theory": "**mouseX and mouseY**\n\np5.js always knows where your mouse is.",
                "steps": [
                    "[NEXT] Move your mouse over the canvas",
                    "Change the circle size to 80",
                    "[TEXT] What happens if you remove background()?",
                    "Make the color change with mouseX",
                ],
                "starterCode": _SETUP + "function draw() {\n  background(220);\n  ellipse(mouseX, mouseY, 40, 40);\n}",
                "challenge": "Build a paint program that only draws while the mouse is pressed!",
                "tags": ["mouse", "interaction"],
            },
        ],
    },
    {
        "id": "workshop-intro",
        "name": "Coding Workshop: First Steps",
        "level": "Beginner (All Ages)",
        "theme": "Drawing and Patterns",
        "duration": "Workshop",
        "description": "Perfect for a single-day workshop or after-school session",
        "goals": ["Basic shapes", "Colors", "Simple patterns", "Fun first project"],
        "units": [
            {"title": "Getting Started", "description": "Your first p5.js sketches", "order": 0},
            {"title": "Creative Coding", "description": "Make colorful art with code", "order": 1},
        ],
        "lessons": [
            {
                "unitIndex": 0,
                "title": "Hello p5.js!",
                "topic": "First Sketch",
                "objective": "Create your first canvas",
                "difficulty": "Beginner",
                "description": "Welcome to coding! Create your very first program",
                "theory": "**Your First Program!**\n\n- `setup()` runs ONCE at the start\n- `draw()` runs OVER and OVER",
                "steps": [
                    "[NEXT] Run the code and see your canvas!",
                    "[TEXT] What color is the background?",
                    "Change 220 to 100 to make it darker",
                    "Change it to 255 for white, or 0 for black",
                ],
                "starterCode": _SETUP + "function draw() {\n  background(220);\n}",
                "challenge": "Try different background colors!",
                "tags": ["setup", "canvas", "background"],
            },
            {
                "unitIndex": 0,
                "title": "Adding Colors",
                "topic": "Color Basics",
                "objective": "Use fill() to add colors",
                "difficulty": "Beginner",
                "description": "Make your shapes colorful!",
                "theory": "**Colors!**\n\nUse `fill()` before drawing a shape to color it.",
                "steps": [
                    "[NEXT] See the red circle",
                    "Change it to blue: fill(0, 0, 255)",
                    "Add a green square",
                    "Try mixing colors: fill(255, 255, 0) for yellow!",
                ],
                "starterCode": _SETUP + "function draw() {\n  background(220);\n  fill(255, 0, 0);\n  ellipse(200, 200, 100, 100);\n}",
                "challenge": "Make a rainbow using different colored circles!",
                "tags": ["color", "fill", "rgb"],
            },
            {
                "unitIndex": 1,
                "title": "Pattern Magic",
                "topic": "Loops",
                "objective": "Create repeating patterns",
                "difficulty": "Beginner",
                "description": "Use loops to draw many shapes at once",
                "theory": "**Loops = Repeating Code**\n\n`for (let i = 0; i < 5; i++)` means \"do this 5 times\".",
                "steps": [
                    "[NEXT] See the row of circles",
                    "[TEXT] How many circles are there?",
                    "Change 5 to 10 to draw more circles",
                    "Change i * 60 to i * 40 to move them closer",
                ],
                "starterCode": (
                    _SETUP + "function draw() {\n  background(220);\n"
                    "  for (let i = 0; i < 5; i++) {\n    ellipse(50 + i * 60, 200, 40, 40);\n  }\n}"
                ),
                "challenge": "Make a grid of circles using TWO loops!",
                "tags": ["loops", "for", "patterns"],
            },
        ],
    },
]

CURRICULUM_TEMPLATES = [CurriculumTemplate.model_validate(entry) for entry in _CATALOG]


def list_curriculum_templates() -> list[CurriculumTemplate]:
    return list(CURRICULUM_TEMPLATES)


def get_curriculum_template(template_id: str) -> Optional[CurriculumTemplate]:
    return next((t for t in CURRICULUM_TEMPLATES if t.id == template_id), None)
