"""
Shared data model for grade records and search suggestions.

SectionRecord is one historical offering of a course section, exactly as
served by GET /api/courses/search?course=... . Suggestion is one autocomplete
entry served by GET /api/courses/search?query=... .

Both models are frozen: records are never edited after they are fetched.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Display order for histograms; only the first five carry GPA points.
GRADE_LETTERS = ("A", "B", "C", "D", "F", "P", "Q", "W", "I", "Z", "R")
GPA_POINTS    = {"A": 4.0, "B": 3.0, "C": 2.0, "D": 1.0, "F": 0.0}

SuggestionType = Literal["course", "professor"]


class Suggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    suggestion: str
    type: SuggestionType


class SectionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject_id: str
    course_number: str
    course_title: str = ""
    instructor1: str
    year: str
    semester: str
    section_number: str
    course_gpa: float
    grades_count: int
    grades: dict[str, int] = Field(default_factory=dict)

    # Select boxes hand back strings, so years and numbers are always text.
    @field_validator("subject_id", "course_number", "year", "section_number", mode="before")
    @classmethod
    def _as_text(cls, value: object) -> str:
        return str(value).strip()

    @property
    def course_code(self) -> str:
        return f"{self.subject_id} {self.course_number}"


def compute_gpa(grades: dict[str, int]) -> float:
    """Letter-graded GPA from a grade histogram; 0.0 if nobody got a letter."""
    counted = sum(grades.get(letter, 0) for letter in GPA_POINTS)
    if not counted:
        return 0.0
    points = sum(GPA_POINTS[letter] * grades.get(letter, 0) for letter in GPA_POINTS)
    return round(points / counted, 2)
