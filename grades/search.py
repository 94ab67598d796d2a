"""
Autocomplete search over courses and professors.

Every course ("CSE 1310 INTRO TO PROGRAMMING") and every instructor is one
entry. A query matches an entry when each query token is a prefix of some
token in the entry, so partial keystrokes ("cse 13", "marnim g") already
find candidates. Candidates are ranked by BM25 over the vocabulary terms the
query tokens expand to, min-max normalised to [0, 1], plus:

    +1.0  the entry text starts with the query
    =3.0  the entry is the exact course code typed (always ranks first)

Public API:
    extract_course_code(text) → str | None
    SuggestionIndex(store)
    SuggestionIndex.query(text, limit) → list[Suggestion]
"""

import bisect
import re

import numpy as np
from rank_bm25 import BM25Okapi

from grades.models import Suggestion
from grades.store import GradeStore, course_key

EXACT_SCORE  = 3.0
PREFIX_BONUS = 1.0


def _normalise(scores: np.ndarray) -> np.ndarray:
    """Min-max normalise to [0, 1]; return zeros if all scores equal."""
    lo, hi = scores.min(), scores.max()
    if hi == lo:
        return np.zeros_like(scores)
    return (scores - lo) / (hi - lo)


def _tokenise(text: str) -> list[str]:
    return re.findall(r"[a-z0-9]+", text.lower())


def extract_course_code(query: str) -> str | None:
    """
    Extract a course code from the query (e.g. CSE1310, cse 1310).

    Returns the canonical key ('CSE1310') or None if the query is not a
    course code on its own.
    """
    match = re.fullmatch(r"\s*([A-Za-z]{2,5})\s*(\d{4})\s*", query)
    if match:
        return (match.group(1) + match.group(2)).upper()
    return None


class SuggestionIndex:
    def __init__(self, store: GradeStore):
        self.entries: list[Suggestion] = []
        self._keys: list[str | None] = []   # course key per entry, None for professors
        corpus: list[list[str]] = []

        for code, title in store.courses():
            text = f"{code} {title}".strip()
            self.entries.append(Suggestion(suggestion=text, type="course"))
            self._keys.append(course_key(code))
            # "cse1310" as one token too, so unspaced input still matches
            corpus.append(_tokenise(text) + [course_key(code).lower()])

        for name in store.professors():
            self.entries.append(Suggestion(suggestion=name, type="professor"))
            self._keys.append(None)
            corpus.append(_tokenise(name))

        self._corpus = corpus
        self._vocab = sorted({t for doc in corpus for t in doc})
        self.bm25 = BM25Okapi(corpus) if corpus else None

    def _expand(self, token: str) -> list[str]:
        """All vocabulary terms that start with token."""
        start = bisect.bisect_left(self._vocab, token)
        terms = []
        for term in self._vocab[start:]:
            if not term.startswith(token):
                break
            terms.append(term)
        return terms

    def _matches(self, doc: list[str], tokens: list[str]) -> bool:
        return all(any(t.startswith(q) for t in doc) for q in tokens)

    def query(self, text: str, limit: int = 10) -> list[Suggestion]:
        tokens = _tokenise(text)
        if not tokens or self.bm25 is None:
            return []

        candidate_idx = [i for i, doc in enumerate(self._corpus) if self._matches(doc, tokens)]
        if not candidate_idx:
            return []

        expanded = [term for q in tokens for term in self._expand(q)]
        all_scores = self.bm25.get_scores(expanded)
        scores = _normalise(np.array([all_scores[i] for i in candidate_idx], dtype=float))

        detected_code = extract_course_code(text)
        phrase = " ".join(tokens)

        for local_id, global_id in enumerate(candidate_idx):
            entry_text = " ".join(_tokenise(self.entries[global_id].suggestion))
            if detected_code and self._keys[global_id] == detected_code:
                scores[local_id] = EXACT_SCORE
            elif entry_text.startswith(phrase):
                scores[local_id] += PREFIX_BONUS

        # Highest score first; ties broken alphabetically for a stable dropdown
        ranked = sorted(
            range(len(candidate_idx)),
            key=lambda local_id: (-scores[local_id], self.entries[candidate_idx[local_id]].suggestion),
        )
        return [self.entries[candidate_idx[local_id]] for local_id in ranked[:limit]]
