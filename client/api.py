"""
HTTP client for the backend's /api/courses/search endpoint.

The blocking requests calls are wrapped with asyncio.to_thread for the
client core, which runs on a single asyncio loop.

Errors are raised, not swallowed:
    requests.RequestException  transport failure or non-2xx status
    ValueError                 body is not JSON or not the expected shape
Callers (fetcher, results view) decide how to degrade.
"""

import asyncio
import logging

import requests
from pydantic import TypeAdapter

from grades.config import API_URL
from grades.models import SectionRecord, Suggestion

log = logging.getLogger(__name__)

SEARCH_PATH = "/api/courses/search"

_suggestions = TypeAdapter(list[Suggestion])
_sections    = TypeAdapter(list[SectionRecord])


class GradesAPI:
    def __init__(self, base_url: str = API_URL, timeout: float = 10.0,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = "UTA-Grades-Client/1.0"

    def _get(self, params: dict[str, str]) -> list:
        log.debug("GET %s %r", SEARCH_PATH, params)
        resp = self.session.get(self.base_url + SEARCH_PATH, params=params, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array from {SEARCH_PATH}, got {type(data).__name__}")
        return data

    # ------------------------------------------------------------------
    # Blocking calls
    # ------------------------------------------------------------------

    def fetch_suggestions(self, text: str) -> list[Suggestion]:
        return _suggestions.validate_python(self._get({"query": text}))

    def fetch_sections(self, route_type: str, value: str) -> list[SectionRecord]:
        """route_type is "course" or "professor", matching the query parameter."""
        if route_type not in ("course", "professor"):
            raise ValueError(f"Unknown route type: {route_type!r}")
        return _sections.validate_python(self._get({route_type: value}))

    # ------------------------------------------------------------------
    # Awaitable wrappers
    # ------------------------------------------------------------------

    async def suggest(self, text: str) -> list[Suggestion]:
        return await asyncio.to_thread(self.fetch_suggestions, text)

    async def sections(self, route_type: str, value: str) -> list[SectionRecord]:
        return await asyncio.to_thread(self.fetch_sections, route_type, value)
