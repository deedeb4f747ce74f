"""
Chinese Typo Checker

Dictionary-driven detection and correction of Chinese typos. A dictionary
maps known erroneous phrases to their corrections; documents are scanned for
verbatim occurrences and the corrections are applied in bulk, for a selected
subset, or for one phrase everywhere.

The package is organised as:
- rules / loader: rule model, dictionary and JSON rule-set formats, merging
- index / automaton: enabled-rule lookup and single-pass phrase matching
- scanner: occurrences with line/column positions and diagnostics
- corrector: order-independent replacement of occurrences
- engine: a session object tying rules, index and settings together

Example Usage:
    from typocheck import Engine

    eng = Engine()                      # bundled dictionary, in-memory settings
    eng.add_rule("帮忙", "帮助")
    for occ in eng.scan("请帮忙处理"):
        print(occ.line, occ.column, occ.original, "->", occ.suggestion)
    print(eng.fix_all("请帮忙处理"))     # 请帮助处理
"""

# src/typocheck/__init__.py
from .engine import Engine
from .index import DictionaryIndex
from .models import Diagnostic, MatchOccurrence, Rule, TextEdit
from .rules import RuleStore, merge_rules
from .scanner import scan
from .corrector import fix_all, fix_one, fix_selected

__version__ = "1.0.0"
__all__ = [
    "Engine", "DictionaryIndex", "RuleStore", "merge_rules",
    "Rule", "MatchOccurrence", "TextEdit", "Diagnostic",
    "scan", "fix_all", "fix_selected", "fix_one",
]
