"""
ETL pipeline: loads the raw grade-distribution CSV exports, cleans each row
into a SectionRecord, and writes data/grades.json.

Raw exports (one CSV per term, any file name under data/raw/) carry columns
like:
    Year, Semester, Subject ID, Course Number, Section Number, Course Title,
    Instructor 1, A, B, C, D, F, P, Q, W, I, Z, R, Total Grades

Header matching is case- and spacing-insensitive. Cleaning rules:
  - rows without a subject, course number or section are skipped
  - course_gpa is recomputed from the letter counts (A-F only)
  - grades_count falls back to the sum of all letter counts
  - exact repeats (same course, section, term and instructor) keep the first
    copy only; the upstream exports overlap between terms
"""

import csv
import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from grades.config import GRADES_FILE, RAW_DIR
from grades.models import GRADE_LETTERS, SectionRecord, compute_gpa

log = logging.getLogger(__name__)

HEADER_ALIASES = {
    "subject":          "subject_id",
    "subject_id":       "subject_id",
    "course_number":    "course_number",
    "catalog_number":   "course_number",
    "section":          "section_number",
    "section_number":   "section_number",
    "course_title":     "course_title",
    "title":            "course_title",
    "instructor":       "instructor1",
    "instructor_1":     "instructor1",
    "instructor1":      "instructor1",
    "year":             "year",
    "semester":         "semester",
    "term":             "semester",
    "total_grades":     "grades_count",
    "grades_count":     "grades_count",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _header_key(name: str) -> str:
    """'Instructor 1' and 'instructor_1' → 'instructor_1'."""
    return re.sub(r"[\s\-]+", "_", (name or "").strip().lower())


def _to_int(value: str | None) -> int:
    try:
        return int(float(value)) if value not in (None, "") else 0
    except (ValueError, OverflowError):
        return 0


def load_rows(path: Path) -> list[dict[str, str]]:
    """Read one CSV export; keys are canonical field names or grade letters."""
    with path.open(newline="", encoding="utf-8-sig") as fh:
        rows = []
        for raw in csv.DictReader(fh):
            row = {}
            for name, value in raw.items():
                key = _header_key(name)
                if key.upper() in GRADE_LETTERS:
                    key = key.upper()
                else:
                    key = HEADER_ALIASES.get(key, key)
                row[key] = (value or "").strip()
            rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------

def clean_row(row: dict[str, str]) -> SectionRecord | None:
    """Turn one raw row into a SectionRecord, or None if it is unusable."""
    if not (row.get("subject_id") and row.get("course_number") and row.get("section_number")):
        return None

    grades = {letter: _to_int(row.get(letter)) for letter in GRADE_LETTERS}
    total = _to_int(row.get("grades_count")) or sum(grades.values())

    try:
        return SectionRecord(
            subject_id=row["subject_id"].upper(),
            course_number=row["course_number"],
            course_title=row.get("course_title", "").upper(),
            instructor1=" ".join(row.get("instructor1", "").split()),
            year=row.get("year", ""),
            semester=row.get("semester", "").title(),
            section_number=row["section_number"],
            course_gpa=compute_gpa(grades),
            grades_count=total,
            grades=grades,
        )
    except ValidationError as exc:
        log.debug("Rejected row %r: %s", row, exc)
        return None


def _identity(record: SectionRecord) -> tuple[str, ...]:
    return (
        record.subject_id, record.course_number, record.section_number,
        record.year, record.semester, record.instructor1,
    )


def build_records(rows: list[dict[str, str]]) -> list[SectionRecord]:
    """Clean all rows and drop exact repeats, keeping first-seen order."""
    seen: set[tuple[str, ...]] = set()
    records: list[SectionRecord] = []
    skipped = repeats = 0

    for row in rows:
        record = clean_row(row)
        if record is None:
            skipped += 1
            continue
        key = _identity(record)
        if key in seen:
            repeats += 1
            continue
        seen.add(key)
        records.append(record)

    if skipped:
        log.warning("Skipped %d unusable rows.", skipped)
    if repeats:
        log.info("Dropped %d repeated sections.", repeats)
    return records


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(raw_dir: Path = RAW_DIR, output_file: Path = GRADES_FILE) -> list[SectionRecord]:
    """Load every CSV under raw_dir, clean, save grades.json, return the records."""
    if not raw_dir.exists():
        log.error("Raw grade directory not found: %s", raw_dir)
        files = []
    else:
        files = sorted(raw_dir.glob("*.csv"))

    rows: list[dict[str, str]] = []
    for path in files:
        file_rows = load_rows(path)
        log.info("  %s: %d rows.", path.name, len(file_rows))
        rows.extend(file_rows)

    records = build_records(rows)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(
        json.dumps([r.model_dump() for r in records], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    log.info("Saved %d sections → %s", len(records), output_file)
    return records


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
    run()
