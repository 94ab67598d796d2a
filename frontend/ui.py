"""
Streamlit frontend for UTA Grades.

Calls GET <GRADES_API_URL>/api/courses/search for suggestions and section
history, then lets the user narrow professor → year / semester → section and
shows the grade distribution of the chosen section.

    streamlit run frontend/ui.py

The current results route lives in the page's query string
(?course=CSE%201310 or ?professor=...), so results pages can be bookmarked.

Streamlit reruns the script once per committed input rather than per
keystroke, so this page fetches suggestions directly and shares only
resolve_selection with the keystroke-driven SearchInput and
DebouncedSuggestionFetcher, which serve event-loop frontends.
"""

import asyncio
import sys
from pathlib import Path

import requests
import streamlit as st

# Ensure project root is on sys.path when launched with `streamlit run`
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.api import GradesAPI
from client.normalizer import normalize
from client.presenter import present_section, summarize
from client.results import ResultsView
from client.routes import parse_results_route, results_route
from client.search_input import resolve_selection

api = GradesAPI()

st.set_page_config(page_title="UTA Grades", layout="wide")
st.title("UTA Grades")
st.caption("Learn from your previous peers. See how they did! It's free.")


def _current_route() -> str | None:
    for route_type in ("course", "professor"):
        value = st.query_params.get(route_type)
        if value:
            return results_route(route_type, value)
    return None


def _navigate(route: str) -> None:
    route_type, value = parse_results_route(route)
    st.query_params.clear()
    if route_type:
        st.query_params[route_type] = value
    st.rerun()


def _results_view(route: str | None) -> ResultsView | None:
    """One ResultsView per route, kept across reruns so the selection chain survives."""
    if route is None:
        return None
    view = st.session_state.get("view")
    if view is None or st.session_state.get("route") != route:
        view = ResultsView(api, route)
        with st.spinner("Loading…"):
            asyncio.run(view.load())
        st.session_state["view"] = view
        st.session_state["route"] = route
    return view


view = _results_view(_current_route())

# ---------------------------------------------------------------------------
# Search box
# ---------------------------------------------------------------------------

query = st.text_input(
    "Search for a course or professor",
    value=view.value if view else "",
    placeholder="ex: CSE 1310 or Donna French",
)

suggestions = []
if query.strip():
    try:
        suggestions = api.fetch_suggestions(normalize(query))
    except requests.exceptions.ConnectionError:
        st.error("Cannot reach the API. Start it with: python app/app.py")
    except (requests.RequestException, ValueError) as exc:
        st.error(f"API error: {exc}")

if suggestions:
    choice = st.selectbox("Suggestions", [s.suggestion for s in suggestions])
    if st.button("Search"):
        route, needs_reset = resolve_selection(
            choice,
            suggestions,
            course=view.course if view else None,
            professor=view.professor if view else None,
            route_type=view.route_type if view else None,
        )
        if needs_reset and view is not None:
            view.reset()
        _navigate(route)
elif query.strip():
    st.caption("No suggestions.")

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

if view is None:
    st.stop()

if view.status() == "empty":
    st.info(view.empty_message())
    st.stop()

left, right = st.columns([1, 2])

with left:
    chain = view.chain
    if chain.professor is None:
        for professor in view.professors():
            if st.button(professor, key=f"prof-{professor}", use_container_width=True):
                view.choose_professor(professor)
                st.rerun()
    else:
        st.subheader(f"Courses for Professor: {chain.professor}")

        years = view.years()
        year = st.selectbox(
            "Select Year",
            [None] + years,
            index=years.index(chain.year) + 1 if chain.year in years else 0,
            format_func=lambda y: "Select a year" if y is None else y,
        )
        if year is not None and year != chain.year:
            view.choose_year(year)
            st.rerun()

        semesters = view.semesters()
        semester = st.selectbox(
            "Select Semester",
            [None] + semesters,
            index=semesters.index(chain.semester) + 1 if chain.semester in semesters else 0,
            format_func=lambda s: "Select a semester" if s is None else s,
        )
        if semester is not None and semester != chain.semester:
            view.choose_semester(semester)
            st.rerun()

        for record in view.sections():
            label = f"Section: {record.section_number}"
            if st.button(label, key=f"sec-{record.section_number}", use_container_width=True):
                view.choose_section(record)
                st.rerun()

        if st.button("Back to Professors"):
            view.back_to_professors()
            st.rerun()

with right:
    section = view.detail()
    if section is None:
        st.write(view.prompt())
        scope = view.sections() if view.chain.professor else view.records
        summary = summarize(scope)
        st.caption(
            f"{summary.sections} sections · {summary.students} students · "
            f"average GPA {summary.average_gpa if summary.average_gpa is not None else 'n/a'}"
        )
    else:
        detail = present_section(section)
        st.header(detail.heading)
        for row in (detail.cards[:3], detail.cards[3:]):
            for col, (label, value) in zip(st.columns(3), row):
                col.metric(label, value)
        st.bar_chart(
            {
                "grade": [letter for letter, _ in detail.histogram],
                "students": [count for _, count in detail.histogram],
            },
            x="grade",
            y="students",
        )
