"""
Detail pane content for one section, and summary statistics over many.

The chart itself is drawn by the frontend; this module only produces the
numbers, in GRADE_LETTERS order with zero counts kept so bars line up.
"""

from dataclasses import dataclass

import numpy as np

from grades.models import GPA_POINTS, GRADE_LETTERS, SectionRecord


@dataclass(frozen=True)
class SectionDetail:
    heading: str
    cards: list[tuple[str, str]]
    histogram: list[tuple[str, int]]


@dataclass(frozen=True)
class GradeSummary:
    sections: int
    students: int
    average_gpa: float | None
    histogram: list[tuple[str, int]]


def _histogram(grades: dict[str, int]) -> list[tuple[str, int]]:
    return [(letter, int(grades.get(letter, 0))) for letter in GRADE_LETTERS]


def present_section(record: SectionRecord) -> SectionDetail:
    return SectionDetail(
        heading=record.course_code,
        cards=[
            ("PROFESSOR", record.instructor1),
            ("YEAR", record.year),
            ("SEMESTER", record.semester),
            ("SECTION", record.section_number),
            ("AVERAGE GPA", f"{record.course_gpa:.2f}"),
            ("TOTAL STUDENTS", str(record.grades_count)),
        ],
        histogram=_histogram(record.grades),
    )


def summarize(records: list[SectionRecord]) -> GradeSummary:
    """
    Aggregate statistics across sections.

    average_gpa weights each section by its letter-graded students, so a
    200-student lecture counts more than a 10-student lab. None when no
    section has letter grades.
    """
    if not records:
        return GradeSummary(0, 0, None, _histogram({}))

    counts = np.array(
        [[r.grades.get(letter, 0) for letter in GRADE_LETTERS] for r in records],
        dtype=np.int64,
    )
    totals = counts.sum(axis=0)

    letter_idx = [GRADE_LETTERS.index(letter) for letter in GPA_POINTS]
    points = np.array([GPA_POINTS[letter] for letter in GPA_POINTS])
    graded = totals[letter_idx]

    average = None
    if graded.sum() > 0:
        average = round(float(graded @ points / graded.sum()), 2)

    return GradeSummary(
        sections=len(records),
        students=int(sum(r.grades_count for r in records)),
        average_gpa=average,
        histogram=list(zip(GRADE_LETTERS, (int(n) for n in totals))),
    )
