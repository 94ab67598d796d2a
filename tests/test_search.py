import pytest

from grades.models import SectionRecord, Suggestion
from grades.search import SuggestionIndex, extract_course_code
from grades.store import GradeStore, course_key


def _section(subject, number, title, instructor, section="001"):
    return SectionRecord(
        subject_id=subject,
        course_number=number,
        course_title=title,
        instructor1=instructor,
        year="2023",
        semester="Fall",
        section_number=section,
        course_gpa=3.0,
        grades_count=20,
    )


@pytest.fixture
def store():
    return GradeStore([
        _section("CSE", "1310", "INTRO TO PROGRAMMING", "Donna French"),
        _section("CSE", "1320", "INTERMEDIATE PROGRAMMING", "Donna French"),
        _section("CSE", "3320", "OPERATING SYSTEMS", "Marnim Galib"),
        _section("MATH", "1426", "CALCULUS I", "Jianzhong Su"),
        _section("MATH", "1426", "CALCULUS I", "Jianzhong Su", section="002"),
    ])


@pytest.fixture
def index(store):
    return SuggestionIndex(store)


class TestCourseCodeExtraction:
    """Test course code detection in suggestion queries."""

    def test_extract_uppercase_code(self):
        assert extract_course_code("CSE 1310") == "CSE1310"

    def test_extract_lowercase_unspaced(self):
        assert extract_course_code("cse1310") == "CSE1310"

    def test_partial_code_is_none(self):
        """Test that an incomplete number is not a course code yet."""
        assert extract_course_code("cse 13") is None

    def test_sentence_is_none(self):
        """Test that only a bare code counts, not a code inside text."""
        assert extract_course_code("who teaches cse 1310") is None


class TestCourseKey:

    @pytest.mark.parametrize("raw", ["CSE 1310", "cse1310", " cse  1310 "])
    def test_course_key(self, raw):
        assert course_key(raw) == "CSE1310"


class TestGradeStore:
    """Test store indexes."""

    def test_courses_are_distinct(self, store):
        assert store.courses() == [
            ("CSE 1310", "INTRO TO PROGRAMMING"),
            ("CSE 1320", "INTERMEDIATE PROGRAMMING"),
            ("CSE 3320", "OPERATING SYSTEMS"),
            ("MATH 1426", "CALCULUS I"),
        ]

    def test_professors_are_distinct(self, store):
        assert store.professors() == ["Donna French", "Marnim Galib", "Jianzhong Su"]

    def test_sections_for_course(self, store):
        assert len(store.sections_for_course("math 1426")) == 2

    def test_sections_for_professor_ignores_spacing(self, store):
        assert len(store.sections_for_professor("  donna   FRENCH ")) == 2

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GradeStore.load(tmp_path / "grades.json")


class TestSuggestionIndex:
    """Test autocomplete ranking."""

    def test_partial_tokens_match(self, index):
        """Test that 'cse 13' suggests both 13xx courses."""
        texts = [s.suggestion for s in index.query("cse 13")]
        assert set(texts) == {"CSE 1310 INTRO TO PROGRAMMING", "CSE 1320 INTERMEDIATE PROGRAMMING"}

    def test_exact_code_first(self, index):
        results = index.query("CSE 1320")
        assert results[0] == Suggestion(suggestion="CSE 1320 INTERMEDIATE PROGRAMMING", type="course")

    def test_unspaced_code(self, index):
        """Test that an unspaced code still matches through the joined token."""
        results = index.query("cse1310")
        assert results[0].suggestion == "CSE 1310 INTRO TO PROGRAMMING"

    def test_professor_by_partial_name(self, index):
        results = index.query("marnim g")
        assert results == [Suggestion(suggestion="Marnim Galib", type="professor")]

    def test_title_words_match(self, index):
        texts = [s.suggestion for s in index.query("programming")]
        assert set(texts) == {"CSE 1310 INTRO TO PROGRAMMING", "CSE 1320 INTERMEDIATE PROGRAMMING"}

    def test_mixed_course_and_professor(self, index):
        """Test that one prefix can surface both kinds of entries."""
        results = index.query("s")
        assert Suggestion(suggestion="CSE 3320 OPERATING SYSTEMS", type="course") in results
        assert Suggestion(suggestion="Jianzhong Su", type="professor") in results

    def test_limit(self, index):
        assert len(index.query("c", limit=2)) == 2

    def test_no_match(self, index):
        assert index.query("xyz") == []

    def test_blank_query(self, index):
        assert index.query("   ") == []

    def test_empty_store(self):
        assert SuggestionIndex(GradeStore([])).query("cse") == []
