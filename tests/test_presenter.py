from client.presenter import present_section, summarize
from grades.models import GRADE_LETTERS, SectionRecord


def _record(grades, gpa=3.0, count=None, section="001"):
    return SectionRecord(
        subject_id="CSE",
        course_number="3320",
        instructor1="Marnim Galib",
        year=2023,
        semester="Fall",
        section_number=section,
        course_gpa=gpa,
        grades_count=sum(grades.values()) if count is None else count,
        grades=grades,
    )


class TestSectionDetail:

    def test_cards(self):
        detail = present_section(_record({"A": 3, "B": 1}, gpa=3.75))
        assert detail.heading == "CSE 3320"
        assert detail.cards == [
            ("PROFESSOR", "Marnim Galib"),
            ("YEAR", "2023"),
            ("SEMESTER", "Fall"),
            ("SECTION", "001"),
            ("AVERAGE GPA", "3.75"),
            ("TOTAL STUDENTS", "4"),
        ]

    def test_histogram_keeps_zero_bars(self):
        detail = present_section(_record({"A": 3, "W": 2}))
        assert [letter for letter, _ in detail.histogram] == list(GRADE_LETTERS)
        assert dict(detail.histogram)["A"] == 3
        assert dict(detail.histogram)["W"] == 2
        assert dict(detail.histogram)["B"] == 0


class TestSummary:

    def test_student_weighted_gpa(self):
        summary = summarize([
            _record({"A": 30}, section="001"),
            _record({"F": 10}, section="002"),
        ])
        assert summary.sections == 2
        assert summary.students == 40
        assert summary.average_gpa == 3.0
        assert dict(summary.histogram)["A"] == 30
        assert dict(summary.histogram)["F"] == 10

    def test_withdrawals_not_in_gpa(self):
        summary = summarize([_record({"B": 2, "W": 5})])
        assert summary.average_gpa == 3.0
        assert summary.students == 7

    def test_no_letter_grades(self):
        assert summarize([_record({"P": 4})]).average_gpa is None

    def test_empty(self):
        summary = summarize([])
        assert summary.sections == 0
        assert summary.students == 0
        assert summary.average_gpa is None
        assert all(count == 0 for _, count in summary.histogram)
