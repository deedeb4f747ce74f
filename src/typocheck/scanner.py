from __future__ import annotations
import bisect
import logging
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .config import DIAGNOSTIC_CODE, DIAGNOSTIC_MESSAGE, DIAGNOSTIC_SEVERITY, DIAGNOSTIC_SOURCE
from .index import DictionaryIndex
from .models import Diagnostic, MatchOccurrence

log = logging.getLogger(__name__)


class LineIndex:
    """
    Offset <-> (line, column) conversion for one text snapshot.
    Line breaks are "\\n", "\\r\\n" and "\\r"; positions are 0-based.
    """
    def __init__(self, text: str) -> None:
        self.length = len(text)
        starts = [0]
        i, n = 0, len(text)
        while i < n:
            ch = text[i]
            if ch == "\r":
                if i + 1 < n and text[i + 1] == "\n":
                    i += 1
                starts.append(i + 1)
            elif ch == "\n":
                starts.append(i + 1)
            i += 1
        self._starts = starts

    def offset_to_position(self, offset: int) -> Tuple[int, int]:
        offset = max(0, min(int(offset), self.length))
        line = bisect.bisect_right(self._starts, offset) - 1
        return line, offset - self._starts[line]

    def position_to_offset(self, line: int, column: int) -> int:
        if line < 0:
            return 0
        if line >= len(self._starts):
            return self.length
        return min(self._starts[line] + max(0, column), self.length)

    @property
    def line_count(self) -> int:
        return len(self._starts)


def _find_all(text: str, index: DictionaryIndex) -> List[Tuple[int, str]]:
    """
    All (start, trigger) hits; a trigger never overlaps itself (left-to-right,
    non-overlapping per trigger) but different triggers may overlap.
    """
    next_free: Dict[str, int] = {}
    hits: List[Tuple[int, str]] = []
    for start, trigger in index.automaton.iter_matches(text):
        if start < next_free.get(trigger, 0):
            continue
        next_free[trigger] = start + len(trigger)
        hits.append((start, trigger))
    return hits


def scan(text: str, index: DictionaryIndex) -> List[MatchOccurrence]:
    """
    Locate every trigger phrase of `index` in `text`.

    Returns occurrences ordered by ascending offset. Overlapping hits from
    different triggers (e.g. "AB" and "BC" in "ABC") are all reported.
    """
    if not text or not len(index):
        return []
    lines = LineIndex(text)
    hits = _find_all(text, index)
    hits.sort(key=lambda h: h[0])
    out: List[MatchOccurrence] = []
    for start, trigger in hits:
        line, col = lines.offset_to_position(start)
        out.append(MatchOccurrence(
            original=trigger,
            suggestion=index[trigger],
            start_offset=start,
            length=len(trigger),
            line=line,
            column=col,
        ))
    log.debug("Scanned %d chars against %d triggers: %d occurrence(s)", len(text), len(index), len(out))
    return out


def check_text(text: str, index: DictionaryIndex) -> List[Tuple[str, str]]:
    """(original, suggestion) for each occurrence; positions are not kept."""
    return [(o.original, o.suggestion) for o in scan(text, index)]


def to_diagnostic(occ: MatchOccurrence) -> Diagnostic:
    # occurrences never span a line break unless the trigger itself has one
    end_line, end_col = occ.line, occ.column + occ.length
    if "\n" in occ.original or "\r" in occ.original:
        tail = LineIndex(occ.original)
        last_line, last_col = tail.offset_to_position(len(occ.original))
        end_line, end_col = occ.line + last_line, last_col
    return Diagnostic(
        line=occ.line,
        column=occ.column,
        end_line=end_line,
        end_column=end_col,
        message=DIAGNOSTIC_MESSAGE.format(suggestion=occ.suggestion),
        severity=DIAGNOSTIC_SEVERITY,
        source=DIAGNOSTIC_SOURCE,
        code=DIAGNOSTIC_CODE,
    )


def to_diagnostics(occurrences: Iterable[MatchOccurrence]) -> List[Diagnostic]:
    return [to_diagnostic(o) for o in occurrences]


def summarize(occurrences: Iterable[MatchOccurrence]) -> Dict[str, int]:
    """Occurrence count per trigger, most frequent first."""
    return dict(Counter(o.original for o in occurrences).most_common())
