# src/typocheck/models.py
"""
Data models for the typo checker.

- Rule: one trigger phrase -> correction mapping with an enabled flag.
- MatchOccurrence: one located trigger inside a single text snapshot.
- TextEdit: one replacement operation a host applies to its buffer.
- Diagnostic: the editor-style warning derived from an occurrence.

These classes carry no business logic beyond small conversions.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping


@dataclass(frozen=True, slots=True)
class Rule:
    original: str             # erroneous phrase, identity key (case-sensitive)
    suggestion: str           # corrected phrase
    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"original": self.original, "suggestion": self.suggestion, "enabled": self.enabled}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        return cls(
            original=data["original"],
            suggestion=data["suggestion"],
            enabled=bool(data.get("enabled", True)),
        )


@dataclass(frozen=True, slots=True)
class MatchOccurrence:
    """
    One occurrence of a trigger phrase in a text snapshot.

    Attributes
    ----------
    original : str
        The trigger phrase as found in the text.
    suggestion : str
        The correction proposed by the dictionary.
    start_offset : int
        Character index of the first matched character.
    length : int
        len(original); always > 0.
    line, column : int
        0-based position of start_offset. Only valid for the exact text the
        occurrence was scanned from.
    """
    original: str
    suggestion: str
    start_offset: int
    length: int
    line: int = 0
    column: int = 0

    @property
    def end_offset(self) -> int:
        return self.start_offset + self.length

    @property
    def key(self) -> str:
        # stable identifier for list views (line_column_original)
        return f"{self.line}_{self.column}_{self.original}"

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["end_offset"] = self.end_offset
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchOccurrence":
        original = data["original"]
        return cls(
            original=original,
            suggestion=data["suggestion"],
            start_offset=int(data["start_offset"]),
            length=int(data.get("length", len(original))),
            line=int(data.get("line", 0)),
            column=int(data.get("column", 0)),
        )


@dataclass(frozen=True, slots=True)
class TextEdit:
    start: int                # inclusive character offset in the source text
    end: int                  # exclusive
    replacement: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    line: int
    column: int
    end_line: int
    end_column: int
    message: str
    severity: str
    source: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
