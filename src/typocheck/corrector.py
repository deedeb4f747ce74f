"""
Correction application.

Occurrences are turned into a list of non-overlapping TextEdits against the
text they were scanned from, then spliced in ascending order. Because every
edit refers to offsets of the *unmodified* text, the result does not depend
on the order in which the caller selected the occurrences.

Corrections are applied in a single pass: if a suggestion itself contains a
trigger phrase, a re-scan reports it again.
"""

from __future__ import annotations
import logging
from typing import Iterable, List

from .models import MatchOccurrence, TextEdit

log = logging.getLogger(__name__)


def compute_edits(text: str, occurrences: Iterable[MatchOccurrence]) -> List[TextEdit]:
    """
    Build the edit list for `occurrences` against `text`.

    - Occurrences whose text no longer matches at their offset (scanned from
      another snapshot) are dropped with a warning.
    - Overlapping occurrences are resolved first-come: the earliest start
      wins, and on equal start the longer trigger wins.
    """
    ordered = sorted(occurrences, key=lambda o: (o.start_offset, -o.length))
    edits: List[TextEdit] = []
    prev_end = 0
    for occ in ordered:
        start, end = occ.start_offset, occ.end_offset
        if start < 0 or text[start:end] != occ.original:
            log.warning("Skipping stale occurrence %r at offset %d", occ.original, start)
            continue
        if start < prev_end:
            log.debug("Skipping %r at offset %d: overlaps a previous correction", occ.original, start)
            continue
        edits.append(TextEdit(start=start, end=end, replacement=occ.suggestion))
        prev_end = end
    return edits


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Splice non-overlapping edits into `text` (offsets refer to `text`)."""
    parts: List[str] = []
    prev_end = 0
    for e in sorted(edits, key=lambda e: e.start):
        if e.start < prev_end:
            raise ValueError(f"overlapping edit at offset {e.start}")
        parts.append(text[prev_end:e.start])
        parts.append(e.replacement)
        prev_end = e.end
    parts.append(text[prev_end:])
    return "".join(parts)


def fix_all(text: str, occurrences: Iterable[MatchOccurrence]) -> str:
    edits = compute_edits(text, occurrences)
    log.info("Applying %d correction(s)", len(edits))
    return apply_edits(text, edits)


def fix_selected(text: str, selected: Iterable[MatchOccurrence]) -> str:
    """Same as fix_all, restricted to the occurrences the user selected."""
    return fix_all(text, selected)


def fix_one(text: str, original: str, suggestion: str) -> str:
    """Replace every literal occurrence of `original` (not only the first)."""
    if not original:
        return text
    return text.replace(original, suggestion)
