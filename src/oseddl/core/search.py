"""Approximate text search over flattened deadline events - no I/O dependencies."""

from typing import Sequence

from .ranking import FlatEvent

DEFAULT_FIELDS = ("item.title", "item.description", "item.tags", "event.place")
DEFAULT_THRESHOLD = 0.3
# Shorter queries only match as exact substrings
MIN_FUZZY_LENGTH = 5


def _field_values(record, path: str) -> list[str]:
    """Resolve a dotted field path; list/tuple fields yield one value per element."""
    value = record
    for attr in path.split("."):
        value = getattr(value, attr)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    return [str(value)]


def substring_errors(query: str, text: str) -> int:
    """Fewest single-character edits turning query into some substring of text."""
    previous = [0] * (len(text) + 1)
    for i, qc in enumerate(query, 1):
        current = [i] + [0] * len(text)
        for j, tc in enumerate(text, 1):
            current[j] = min(
                previous[j - 1] + (qc != tc),
                previous[j] + 1,
                current[j - 1] + 1,
            )
        previous = current
    return min(previous)


def match_score(query: str, text: str) -> float:
    """
    Distance between a query and its best match inside text.

    Edit errors divided by the query length: 0.0 is an exact substring
    match, 1.0 or more is no resemblance. Queries shorter than
    MIN_FUZZY_LENGTH score 0.0 or 1.0 only.
    """
    query = query.lower()
    text = text.lower()
    if not query:
        return 1.0
    if query in text:
        return 0.0
    if len(query) < MIN_FUZZY_LENGTH:
        return 1.0
    return substring_errors(query, text) / len(query)


class FuzzyIndex:
    """
    Typo-tolerant index over a fixed list of records.

    Implements the SearchIndex protocol. Built once per flattening;
    search() returns positions into the indexed sequence, best match first.
    threshold is the maximum accepted distance: lower is stricter.
    """

    def __init__(
        self,
        records: Sequence[FlatEvent],
        fields: Sequence[str] = DEFAULT_FIELDS,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.fields = tuple(fields)
        self.threshold = threshold
        self._texts: list[list[str]] = [
            [v for path in self.fields for v in _field_values(r, path) if v]
            for r in records
        ]

    def __len__(self) -> int:
        return len(self._texts)

    def score(self, position: int, query: str) -> float:
        """Best (lowest) distance of the query against any field of a record."""
        return min((match_score(query, t) for t in self._texts[position]), default=1.0)

    def search(self, query: str) -> list[int]:
        """Positions of records within threshold, most relevant first."""
        query = query.strip()
        if not query:
            return []
        scored = []
        for position in range(len(self._texts)):
            s = self.score(position, query)
            if s <= self.threshold:
                scored.append((s, position))
        scored.sort()
        return [position for _, position in scored]
