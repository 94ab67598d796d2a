import json

import pytest

from etl.pipeline import build_records, clean_row, load_rows, run
from grades.models import compute_gpa
from grades.store import GradeStore

HEADER = (
    "Year,Semester,Subject ID,Course Number,Section Number,Course Title,Instructor 1,"
    "A,B,C,D,F,P,Q,W,I,Z,R,Total Grades\n"
)


@pytest.fixture
def raw_dir(tmp_path):
    """Two overlapping term exports, as they come from the registrar."""
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "2023_fall.csv").write_text(
        HEADER
        + "2023,FALL,cse,1310,001,Intro to Programming,Donna  French,10,10,0,0,0,0,0,2,0,0,0,22\n"
        + "2023,FALL,cse,1310,002,Intro to Programming,Donna French,0,0,5,5,10,0,0,0,0,0,0,\n"
        + "2023,FALL,,1310,003,Missing Subject,Nobody,1,0,0,0,0,0,0,0,0,0,0,1\n",
        encoding="utf-8",
    )
    (raw / "2023_fall_rerun.csv").write_text(
        HEADER
        + "2023,FALL,cse,1310,001,Intro to Programming,Donna French,10,10,0,0,0,0,0,2,0,0,0,22\n",
        encoding="utf-8",
    )
    return raw


class TestGpa:
    """Test GPA computation from letter counts."""

    def test_letter_grades_only(self):
        """Test that W/P/Q do not count toward GPA."""
        assert compute_gpa({"A": 10, "B": 10, "W": 5, "P": 3}) == 3.5

    def test_no_letter_grades(self):
        assert compute_gpa({"W": 4}) == 0.0


class TestRowCleaning:
    """Test single-row cleaning."""

    def test_headers_are_canonicalised(self, raw_dir):
        row = load_rows(raw_dir / "2023_fall.csv")[0]
        assert row["subject_id"] == "cse"
        assert row["instructor1"] == "Donna  French"
        assert row["grades_count"] == "22"
        assert row["A"] == "10"

    def test_clean_row(self, raw_dir):
        record = clean_row(load_rows(raw_dir / "2023_fall.csv")[0])
        assert record.subject_id == "CSE"
        assert record.course_code == "CSE 1310"
        assert record.course_title == "INTRO TO PROGRAMMING"
        assert record.instructor1 == "Donna French"
        assert record.semester == "Fall"
        assert record.course_gpa == 3.5
        assert record.grades_count == 22
        assert record.grades["W"] == 2

    def test_missing_total_falls_back_to_sum(self, raw_dir):
        record = clean_row(load_rows(raw_dir / "2023_fall.csv")[1])
        assert record.grades_count == 20
        assert record.course_gpa == 0.75

    @pytest.mark.parametrize("cell", ["inf", "-inf", "nan", "lots", "1e400"])
    def test_malformed_count_cell(self, cell):
        """Test that a garbage grade cell reads as zero instead of aborting the row."""
        row = {
            "year": "2023", "semester": "FALL", "subject_id": "cse", "course_number": "1310",
            "section_number": "001", "instructor1": "Donna French",
            "A": cell, "B": "4", "grades_count": cell,
        }
        record = clean_row(row)
        assert record.grades["A"] == 0
        assert record.grades["B"] == 4
        assert record.grades_count == 4
        assert record.course_gpa == 3.0

    def test_unusable_row(self):
        assert clean_row({"subject_id": "", "course_number": "1310", "section_number": "001"}) is None


class TestPipelineRun:
    """Test the full ETL run."""

    def test_repeats_and_bad_rows_dropped(self, raw_dir):
        rows = load_rows(raw_dir / "2023_fall.csv") + load_rows(raw_dir / "2023_fall_rerun.csv")
        records = build_records(rows)
        assert [r.section_number for r in records] == ["001", "002"]

    def test_malformed_cell_does_not_abort_run(self, raw_dir, tmp_path):
        (raw_dir / "2024_spring.csv").write_text(
            HEADER
            + "2024,SPRING,cse,1310,001,Intro to Programming,Donna French,inf,3,0,0,0,0,0,0,0,0,0,inf\n",
            encoding="utf-8",
        )
        records = run(raw_dir=raw_dir, output_file=tmp_path / "grades.json")
        spring = [r for r in records if r.year == "2024"]
        assert len(spring) == 1
        assert spring[0].grades_count == 3

    def test_run_writes_loadable_file(self, raw_dir, tmp_path):
        output = tmp_path / "data" / "grades.json"
        records = run(raw_dir=raw_dir, output_file=output)

        assert len(records) == 2
        assert len(json.loads(output.read_text(encoding="utf-8"))) == 2

        store = GradeStore.load(output)
        assert [r.section_number for r in store.sections_for_course("CSE 1310")] == ["001", "002"]

    def test_missing_raw_dir(self, tmp_path):
        output = tmp_path / "grades.json"
        assert run(raw_dir=tmp_path / "nope", output_file=output) == []
        assert json.loads(output.read_text(encoding="utf-8")) == []
