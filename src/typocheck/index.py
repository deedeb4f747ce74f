"""
Dictionary index for the typo scanner.

The index is derived from a rule set: it maps each enabled rule's trigger
phrase to its correction and carries a PhraseAutomaton over those triggers
so that a document is scanned for all of them in a single pass. It is never
edited in place; rebuild() it whenever the rules change.
"""

from __future__ import annotations
from typing import Dict, ItemsView, Iterable, Iterator, Optional

from .automaton import PhraseAutomaton
from .models import Rule


class DictionaryIndex:
    def __init__(self, mapping: Optional[Dict[str, str]] = None) -> None:
        self._map: Dict[str, str] = {k: v for k, v in (mapping or {}).items() if k}
        self._automaton: PhraseAutomaton | None = None

    @classmethod
    def rebuild(cls, rules: Iterable[Rule]) -> "DictionaryIndex":
        """
        Build an index from the enabled rules in `rules`.

        If two enabled rules share an `original` (RuleStore prevents this)
        the later one wins. Empty input gives an empty index.

        Example:
            >>> idx = DictionaryIndex.rebuild([Rule("帮忙", "帮助"), Rule("的的", "的", enabled=False)])
            >>> dict(idx.items())
            {'帮忙': '帮助'}
        """
        mapping: Dict[str, str] = {}
        for rule in rules:
            if rule.enabled:
                mapping[rule.original] = rule.suggestion
        return cls(mapping)

    @property
    def automaton(self) -> PhraseAutomaton:
        # built lazily, once per index
        if self._automaton is None:
            self._automaton = PhraseAutomaton.from_phrases(self._map.keys())
        return self._automaton

    # ---- lookups ----
    def get(self, trigger: str, default: Optional[str] = None) -> Optional[str]:
        return self._map.get(trigger, default)

    def correction(self, word: str) -> Optional[str]:
        return self._map.get(word)

    def is_typo(self, word: str) -> bool:
        return word in self._map

    def items(self) -> ItemsView[str, str]:
        return self._map.items()

    def as_dict(self) -> Dict[str, str]:
        return dict(self._map)

    def __getitem__(self, trigger: str) -> str:
        return self._map[trigger]

    def __contains__(self, trigger: object) -> bool:
        return trigger in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"DictionaryIndex(triggers={len(self._map)})"
