"""
Normalisation of raw search-box input into the query sent to the backend.

    "cse1310"    → "cse 1310"     course code: split letters from digits
    "marnimg"    → "marnim g"     concatenated name ending in an initial g
    "MARNIMG"    → "MARNIM g"     the split-off initial is always lowercase
    "  a   b "   → "a b"          anything else: collapse whitespace

The "ends in g" rule matches a single naming collision in the grade data.
It also splits ordinary names ("doug" → "dou g"); the backend's prefix
matching still finds the professor either way.
"""

import re

COURSE_PATTERN = re.compile(r"^([A-Za-z]+)(\d+)$")
TRAILING_G     = re.compile(r"^([A-Za-z]+)g$", re.IGNORECASE)


def normalize(raw: str) -> str:
    compact = "".join(raw.split())

    match = COURSE_PATTERN.match(compact)
    if match:
        return f"{match.group(1)} {match.group(2)}"

    match = TRAILING_G.match(compact)
    if match:
        return f"{match.group(1)} g"

    return " ".join(raw.split())
