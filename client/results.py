"""
Results page model: section history for one course (or professor), narrowed
by professor → year / semester → section.

SelectionChain is immutable; every choice returns a new chain.
    choose_professor   clears year, semester and section
    choose_year        keeps the section; it just disappears from the detail
    choose_semester    pane if the narrowed list no longer holds it
    choose_section
    clear              back to the professor list

ResultsAggregator derives everything the page lists from the records and a
chain, without side effects. ResultsView owns the fetch and the current chain.
"""

import logging
from dataclasses import dataclass, replace

from client.api import GradesAPI
from client.routes import parse_results_route
from grades.models import SectionRecord

log = logging.getLogger(__name__)


def _distinct(values) -> list:
    """Unique values in first-seen order."""
    return list(dict.fromkeys(values))


@dataclass(frozen=True)
class SelectionChain:
    professor: str | None = None
    year: str | None = None
    semester: str | None = None
    section: SectionRecord | None = None

    def choose_professor(self, professor: str) -> "SelectionChain":
        return SelectionChain(professor=professor)

    def choose_year(self, year: str) -> "SelectionChain":
        return replace(self, year=year)

    def choose_semester(self, semester: str) -> "SelectionChain":
        return replace(self, semester=semester)

    def choose_section(self, section: SectionRecord) -> "SelectionChain":
        return replace(self, section=section)

    def clear(self) -> "SelectionChain":
        return SelectionChain()


class ResultsAggregator:
    def __init__(self, records: list[SectionRecord]):
        self.records = list(records)

    def professors(self) -> list[str]:
        return _distinct(r.instructor1 for r in self.records)

    def filtered_by_professor(self, chain: SelectionChain) -> list[SectionRecord]:
        if not chain.professor:
            return []
        return [r for r in self.records if r.instructor1 == chain.professor]

    def years(self, chain: SelectionChain) -> list[str]:
        return _distinct(r.year for r in self.filtered_by_professor(chain))

    def semesters(self, chain: SelectionChain) -> list[str]:
        return _distinct(r.semester for r in self.filtered_by_professor(chain))

    def final_filtered(self, chain: SelectionChain) -> list[SectionRecord]:
        """Year and semester narrowing, then one record per section_number (first wins)."""
        unique: dict[str, SectionRecord] = {}
        for r in self.filtered_by_professor(chain):
            if chain.year and r.year != chain.year:
                continue
            if chain.semester and r.semester != chain.semester:
                continue
            unique.setdefault(r.section_number, r)
        return list(unique.values())

    def detail(self, chain: SelectionChain) -> SectionRecord | None:
        """The chosen section, if it is still in the narrowed list."""
        if chain.section is None:
            return None
        if any(r == chain.section for r in self.final_filtered(chain)):
            return chain.section
        return None

    def settle(self, chain: SelectionChain) -> SelectionChain:
        """Forget the chosen section once narrowing has removed it."""
        if chain.section is not None and self.detail(chain) is None:
            return replace(chain, section=None)
        return chain


class ResultsView:
    def __init__(self, api: GradesAPI, route: str):
        self.api = api
        self.route_type, self.value = parse_results_route(route)

        self.records: list[SectionRecord] = []
        self.aggregator = ResultsAggregator([])
        self.chain = SelectionChain()
        self.loading = True

    @property
    def course(self) -> str | None:
        return self.value if self.route_type == "course" else None

    @property
    def professor(self) -> str | None:
        return self.value if self.route_type == "professor" else None

    async def load(self) -> None:
        self.loading = True
        try:
            if self.route_type is not None:
                self.records = await self.api.sections(self.route_type, self.value)
                log.info("Loaded %d sections for %s=%r", len(self.records), self.route_type, self.value)
        except Exception:
            log.exception("Error fetching sections for %s=%r", self.route_type, self.value)
            self.records = []
        finally:
            self.aggregator = ResultsAggregator(self.records)
            self.chain = SelectionChain()
            self.loading = False

    def status(self) -> str:
        if self.loading:
            return "loading"
        return "ready" if self.records else "empty"

    def empty_message(self) -> str:
        return f'No results found for "{self.value}". Please try another search.'

    def prompt(self) -> str:
        if self.chain.professor:
            return "Select Year, Semester, and Section to see more information."
        return "Select a Professor to see more information."

    # ------------------------------------------------------------------
    # Selection chain transitions
    # ------------------------------------------------------------------

    def choose_professor(self, professor: str) -> None:
        self.chain = self.chain.choose_professor(professor)

    def choose_year(self, year: str) -> None:
        self.chain = self.aggregator.settle(self.chain.choose_year(year))

    def choose_semester(self, semester: str) -> None:
        self.chain = self.aggregator.settle(self.chain.choose_semester(semester))

    def choose_section(self, section: SectionRecord) -> None:
        self.chain = self.chain.choose_section(section)

    def back_to_professors(self) -> None:
        self.chain = self.chain.clear()

    def reset(self) -> None:
        """Reset callback for the page's search box."""
        self.chain = SelectionChain()

    # ------------------------------------------------------------------
    # Derived lists for rendering
    # ------------------------------------------------------------------

    def professors(self) -> list[str]:
        return self.aggregator.professors()

    def years(self) -> list[str]:
        return self.aggregator.years(self.chain)

    def semesters(self) -> list[str]:
        return self.aggregator.semesters(self.chain)

    def sections(self) -> list[SectionRecord]:
        return self.aggregator.final_filtered(self.chain)

    def detail(self) -> SectionRecord | None:
        return self.aggregator.detail(self.chain)
