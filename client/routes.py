"""
Results-page routes: /results?course=<value> and /results?professor=<value>.
"""

from typing import Literal
from urllib.parse import parse_qs, quote, urlsplit

RouteType = Literal["course", "professor"]

RESULTS_PATH = "/results"

# Characters encodeURIComponent leaves alone besides the unreserved set
_SAFE = "!~*'()"


def results_route(route_type: RouteType, value: str) -> str:
    return f"{RESULTS_PATH}?{route_type}={quote(value, safe=_SAFE)}"


def parse_results_route(route: str) -> tuple[RouteType | None, str]:
    """
    Return (route_type, value) for a results route.

    course= wins if both are present; (None, "") if neither is.
    """
    params = parse_qs(urlsplit(route).query)
    for route_type in ("course", "professor"):
        values = params.get(route_type)
        if values and values[0].strip():
            return route_type, values[0]
    return None, ""
