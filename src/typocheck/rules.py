# src/typocheck/rules.py
"""
Rule store: an ordered map of typo rules keyed by their `original` phrase.

Rules are layered (bundled defaults, settings, user override file) by
merging; a later layer replaces the suggestion / enabled flag of a rule with
the same `original`, and appends rules it introduces. The store never holds
two rules with the same key.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Rule


class RuleStore:
    """
    Ordered collection of Rules with `original` as the dedup key.

    Insertion order is kept only for stable presentation; lookups and
    merges are by key.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: Dict[str, Rule] = {}
        self.merge(rules)

    # ---- Create / Update ----
    def upsert(self, rule: Rule) -> None:
        """Insert `rule`, or overwrite suggestion and enabled of the existing one."""
        current = self._rules.get(rule.original)
        if current is None:
            self._rules[rule.original] = rule
        else:
            self._rules[rule.original] = replace(
                current, suggestion=rule.suggestion, enabled=rule.enabled
            )

    def merge(self, incoming: Iterable[Rule]) -> "RuleStore":
        for rule in incoming:
            self.upsert(rule)
        return self

    def set_enabled(self, original: str, enabled: bool) -> Rule:
        current = self._rules.get(original)
        if current is None:
            raise KeyError(original)
        updated = replace(current, enabled=bool(enabled))
        self._rules[original] = updated
        return updated

    # ---- Read ----
    def find(self, original: str) -> Optional[Rule]:
        return self._rules.get(original)

    def filter_enabled(self) -> List[Rule]:
        return [r for r in self._rules.values() if r.enabled]

    def to_list(self) -> List[Rule]:
        return list(self._rules.values())

    def __contains__(self, original: object) -> bool:
        return original in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    # ---- Delete ----
    def remove(self, original: str) -> Optional[Rule]:
        return self._rules.pop(original, None)

    def clear(self) -> None:
        self._rules.clear()

    def copy(self) -> "RuleStore":
        return RuleStore(self._rules.values())

    def __repr__(self) -> str:
        return f"RuleStore(rules={len(self._rules)}, enabled={len(self.filter_enabled())})"


def merge_rules(existing: Iterable[Rule], incoming: Iterable[Rule]) -> List[Rule]:
    """
    Upsert `incoming` into `existing` and return the merged list.

    Last writer wins per `original`; keys of `existing` keep their order and
    new keys are appended. Merging the same `incoming` again is a no-op.
    """
    return RuleStore(existing).merge(incoming).to_list()
