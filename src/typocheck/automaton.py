from __future__ import annotations
from collections import deque
from typing import Dict, Iterable, Iterator, List, Tuple


class PhraseAutomaton:
    """
    Aho-Corasick automaton over literal phrases.
    Build-time: add() phrases into a trie, then build() the failure links.
    Query: iter_matches(text) walks the text once and yields every
    (start, phrase) hit, including overlapping ones, ordered by end position
    (longest phrase first among hits ending at the same position).
    Phrases are plain strings; no character has special meaning.
    """
    def __init__(self) -> None:
        self._goto: List[Dict[str, int]] = [{}]
        self._fail: List[int] = [0]
        self._out: List[List[str]] = [[]]
        self._phrases: set[str] = set()
        self._built: bool = False

    @classmethod
    def from_phrases(cls, phrases: Iterable[str]) -> "PhraseAutomaton":
        ac = cls()
        for p in phrases:
            ac.add(p)
        ac.build()
        return ac

    # -------- Build-time API --------
    def add(self, phrase: str) -> bool:
        """Insert a phrase; empty or repeated phrases are ignored (returns False)."""
        if self._built:
            raise RuntimeError("automaton is built; cannot add")
        if not phrase or phrase in self._phrases:
            return False
        state = 0
        for ch in phrase:
            nxt = self._goto[state].get(ch)
            if nxt is None:
                nxt = len(self._goto)
                self._goto.append({})
                self._fail.append(0)
                self._out.append([])
                self._goto[state][ch] = nxt
            state = nxt
        self._out[state].append(phrase)
        self._phrases.add(phrase)
        return True

    def build(self) -> None:
        """Compute failure links breadth-first and fold suffix outputs in."""
        if self._built:
            return
        queue: deque[int] = deque()
        for nxt in self._goto[0].values():
            self._fail[nxt] = 0
            queue.append(nxt)
        while queue:
            state = queue.popleft()
            for ch, nxt in self._goto[state].items():
                queue.append(nxt)
                f = self._fail[state]
                while f and ch not in self._goto[f]:
                    f = self._fail[f]
                target = self._goto[f].get(ch, 0)
                self._fail[nxt] = target if target != nxt else 0
                # own phrase (longest) first, then shorter suffix phrases
                self._out[nxt] = self._out[nxt] + self._out[self._fail[nxt]]
        self._built = True

    # -------- Query --------
    def iter_matches(self, text: str) -> Iterator[Tuple[int, str]]:
        if not self._built:
            self.build()
        if not self._phrases:
            return
        goto, fail, out = self._goto, self._fail, self._out
        state = 0
        for i, ch in enumerate(text):
            while state and ch not in goto[state]:
                state = fail[state]
            state = goto[state].get(ch, 0)
            if out[state]:
                for phrase in out[state]:
                    yield i - len(phrase) + 1, phrase

    def __contains__(self, phrase: object) -> bool:
        return phrase in self._phrases

    def __len__(self) -> int:
        return len(self._phrases)
