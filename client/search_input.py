"""
Search box: typed text → debounced suggestions → selection → results route.

States:
    IDLE → TYPING → (LOADING | SUGGESTIONS_SHOWN) → SELECTED

Selecting a suggestion navigates exactly once. The reset callback (which
clears the results page's professor/year/semester/section chain) runs at
most once, and not at all when the selection is what the page already shows:
re-searching "CSE 3320" while on the CSE 3320 page keeps the chain intact.
"""

import enum
import logging
import re
from collections.abc import Callable

from client.fetcher import DebouncedSuggestionFetcher
from client.routes import RouteType, results_route
from grades.models import Suggestion

log = logging.getLogger(__name__)

FOUR_DIGITS = re.compile(r"\d{4}")


class InputState(enum.Enum):
    IDLE = "idle"
    TYPING = "typing"
    LOADING = "loading"
    SUGGESTIONS_SHOWN = "suggestions_shown"
    SELECTED = "selected"


def leading_course_code(suggestion: str) -> str:
    """'CSE 3320 OPERATING SYSTEMS' → 'CSE 3320' (first two tokens)."""
    return " ".join(suggestion.split(" ")[:2])


def canonical_course(suggestion: str) -> str:
    """Strip the title from a course suggestion when it starts with '<PREFIX> <4 digits>'."""
    parts = leading_course_code(suggestion).split(" ")
    if len(parts) >= 2 and FOUR_DIGITS.fullmatch(parts[1]):
        return f"{parts[0]} {parts[1]}"
    return suggestion


def resolve_selection(
    suggestion: str,
    suggestions: list[Suggestion],
    course: str | None = None,
    professor: str | None = None,
    route_type: RouteType | None = None,
) -> tuple[str, bool]:
    """
    Work out where a picked suggestion leads.

    Returns (route, needs_reset). needs_reset is False when the page already
    shows that course or professor.
    """
    is_professor = any(s.suggestion == suggestion and s.type == "professor" for s in suggestions)

    already_shown = (
        (course == leading_course_code(suggestion) and route_type == "course")
        or (professor == suggestion and route_type == "professor")
    )

    if is_professor:
        route = results_route("professor", suggestion)
    else:
        route = results_route("course", canonical_course(suggestion))
    return route, not already_shown


class SearchInput:
    def __init__(
        self,
        fetcher: DebouncedSuggestionFetcher,
        navigate: Callable[[str], None],
        reset_state: Callable[[], None] | None = None,
        course: str | None = None,
        professor: str | None = None,
        route_type: RouteType | None = None,
        initial_value: str = "",
    ):
        self.fetcher = fetcher
        self.fetcher.on_change = self._on_fetcher_change
        self.navigate = navigate
        self.reset_state = reset_state

        # What the surrounding results page is currently displaying
        self.course = course
        self.professor = professor
        self.route_type = route_type

        self.value = initial_value
        self.state = InputState.IDLE

    @property
    def suggestions(self) -> list[Suggestion]:
        return self.fetcher.suggestions

    def set_initial_value(self, value: str) -> None:
        self.value = value

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def type_text(self, text: str) -> None:
        self.value = text
        self.state = InputState.TYPING
        self.fetcher.submit(text)

    def press_enter(self) -> None:
        """Enter (or the search icon) picks the first suggestion, if any."""
        if self.suggestions:
            self.select(self.suggestions[0].suggestion)

    def select(self, suggestion: str) -> str:
        """Handle a picked suggestion; returns the route navigated to."""
        route, needs_reset = resolve_selection(
            suggestion, self.suggestions, self.course, self.professor, self.route_type
        )
        if needs_reset and self.reset_state is not None:
            self.reset_state()

        self.value = suggestion
        self.fetcher.clear()
        self.state = InputState.SELECTED

        log.debug("Selected %r → %s (reset=%s)", suggestion, route, needs_reset)
        self.navigate(route)
        return route

    def close(self) -> None:
        self.fetcher.close()

    # ------------------------------------------------------------------
    # Fetcher updates
    # ------------------------------------------------------------------

    def _on_fetcher_change(self, fetcher: DebouncedSuggestionFetcher) -> None:
        if self.state is InputState.SELECTED:
            return
        if fetcher.loading:
            self.state = InputState.LOADING
        elif fetcher.suggestions:
            self.state = InputState.SUGGESTIONS_SHOWN
        else:
            self.state = InputState.TYPING if self.value else InputState.IDLE
