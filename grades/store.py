"""
In-memory grade store.

Loads data/grades.json (written by etl/pipeline.py) once and indexes the
section records by course code and by instructor.

Public API:
    GradeStore(records)
    GradeStore.load(path) → GradeStore
    GradeStore.sections_for_course(code) → list[SectionRecord]
    GradeStore.sections_for_professor(name) → list[SectionRecord]
    GradeStore.courses() → list[(code, title)]
    GradeStore.professors() → list[str]
"""

import json
from collections import defaultdict
from pathlib import Path

from grades.config import GRADES_FILE
from grades.models import SectionRecord

# Within a year, later terms sort first.
SEMESTER_RANK = {"fall": 3, "summer": 2, "spring": 1}


def course_key(code: str) -> str:
    """Canonicalise course codes: 'CSE 1310' and 'cse1310' → 'CSE1310'."""
    return "".join(code.split()).upper()


def _name_key(name: str) -> str:
    return " ".join(name.split()).lower()


def _newest_first(record: SectionRecord) -> tuple:
    year = int(record.year) if record.year.isdigit() else 0
    return (-year, -SEMESTER_RANK.get(record.semester.lower(), 0), record.section_number)


class GradeStore:
    def __init__(self, records: list[SectionRecord]):
        self.records = records

        self._by_course: dict[str, list[SectionRecord]] = defaultdict(list)
        self._by_professor: dict[str, list[SectionRecord]] = defaultdict(list)
        self._titles: dict[str, tuple[str, str]] = {}

        for r in records:
            key = course_key(r.course_code)
            self._by_course[key].append(r)
            if r.instructor1:
                self._by_professor[_name_key(r.instructor1)].append(r)
            # First non-empty title wins
            if key not in self._titles or (r.course_title and not self._titles[key][1]):
                self._titles[key] = (r.course_code, r.course_title)

        self._professor_names: dict[str, str] = {}
        for r in records:
            if r.instructor1:
                self._professor_names.setdefault(_name_key(r.instructor1), r.instructor1)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def sections_for_course(self, code: str) -> list[SectionRecord]:
        return sorted(self._by_course.get(course_key(code), []), key=_newest_first)

    def sections_for_professor(self, name: str) -> list[SectionRecord]:
        return sorted(self._by_professor.get(_name_key(name), []), key=_newest_first)

    def courses(self) -> list[tuple[str, str]]:
        """(course code, title) pairs, one per course."""
        return list(self._titles.values())

    def professors(self) -> list[str]:
        return list(self._professor_names.values())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path = GRADES_FILE) -> "GradeStore":
        if not path.exists():
            raise FileNotFoundError(f"grades.json not found at {path}. Run the ETL pipeline first.")
        rows = json.loads(path.read_text(encoding="utf-8"))
        return cls([SectionRecord.model_validate(row) for row in rows])
