"""
Rule Loading and Serialization Module

This module reads and writes the two rule formats the checker understands:

- Dictionary text files: one rule per line, "错误词：正确词", separated by a
  full-width colon. Blank lines and lines starting with "#" are comments.
  Malformed lines are skipped silently so hand-edited files keep working.
- JSON rule sets: an array of {"original", "suggestion", "enabled"} objects,
  used to share rules between users (import / export).

Key Functions:
    parse_rules(text): Parse dictionary text into Rule objects
    serialize_rules(rules): Render rules back into dictionary text
    load_rule_file(path): Read and parse a dictionary file
    write_rule_file(path, rules): Write rules as a dictionary file
    parse_rules_json(text): Validate and parse a JSON rule set
    import_rules_json(path): Read and parse a JSON rule set file
    export_rules_json(rules, directory): Write a dated JSON export

I/O failures surface as FileAccessError; malformed JSON as RuleParseError.
"""

# src/typocheck/loader.py
from __future__ import annotations
import datetime as _dt
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional

from .config import COMMENT_PREFIX, ENCODING, EXPORT_PREFIX, SEPARATOR
from .errors import FileAccessError, RuleParseError
from .models import Rule

log = logging.getLogger(__name__)


def _parse_line(line: str) -> Optional[Rule]:
    """
    Parse one dictionary line into a Rule, or None when it is not a rule.

    The line is split on the separator and its first two pieces are used,
    so "a：b：c" yields a -> b.

    Example:
        >>> _parse_line("按装：安装")
        Rule(original='按装', suggestion='安装', enabled=True)
        >>> _parse_line("# comment") is None
        True
    """
    s = line.strip()
    if not s or s.startswith(COMMENT_PREFIX) or SEPARATOR not in s:
        return None
    parts = [p.strip() for p in s.split(SEPARATOR)]
    typo, correction = parts[0], parts[1]
    if not typo or not correction:
        return None
    return Rule(original=typo, suggestion=correction, enabled=True)


def parse_rules(text: str) -> List[Rule]:
    """
    Parse dictionary text into a list of enabled Rules, in file order.

    Duplicate keys are returned as-is; RuleStore.merge resolves them
    (last one wins).
    """
    rules: List[Rule] = []
    skipped = 0
    for line in text.splitlines():
        rule = _parse_line(line)
        if rule is None:
            if line.strip() and not line.strip().startswith(COMMENT_PREFIX):
                skipped += 1
            continue
        rules.append(rule)
    if skipped:
        log.debug("Skipped %d malformed dictionary line(s)", skipped)
    return rules


def serialize_rules(rules: Iterable[Rule]) -> str:
    """Render rules as dictionary text (the enabled flag is not written)."""
    return "".join(f"{r.original}{SEPARATOR}{r.suggestion}\n" for r in rules)


def load_rule_file(path: str | os.PathLike) -> List[Rule]:
    """Read a dictionary file. Raises FileAccessError if it cannot be read."""
    p = Path(path)
    try:
        text = p.read_text(encoding=ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"无法加载错别字文件: {p}: {exc}") from exc
    rules = parse_rules(text)
    log.info("Loaded %d rule(s) from %s", len(rules), p)
    return rules


def write_rule_file(path: str | os.PathLike, rules: Iterable[Rule]) -> str:
    """Write rules to a dictionary file atomically and return its path."""
    p = Path(path)
    tmp = p.with_name(p.name + ".tmp")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(serialize_rules(rules), encoding="utf-8")
        os.replace(tmp, p)
    except OSError as exc:
        raise FileAccessError(f"无法写入错别字文件: {p}: {exc}") from exc
    return str(p)


# ---- JSON rule sets ----

def _validate_item(i: int, item: Any) -> Rule:
    if not isinstance(item, dict):
        raise RuleParseError(f"规则文件格式错误：第 {i + 1} 条规则必须是对象")
    original = item.get("original")
    suggestion = item.get("suggestion")
    if not isinstance(original, str) or not original:
        raise RuleParseError(f"规则文件格式错误：第 {i + 1} 条规则缺少 original")
    if not isinstance(suggestion, str) or not suggestion:
        raise RuleParseError(f"规则文件格式错误：第 {i + 1} 条规则缺少 suggestion")
    enabled = item.get("enabled", True)
    if enabled is None:
        enabled = True
    if not isinstance(enabled, bool):
        raise RuleParseError(f"规则文件格式错误：第 {i + 1} 条规则的 enabled 必须是布尔值")
    return Rule(original=original, suggestion=suggestion, enabled=enabled)


def parse_rules_json(text: str) -> List[Rule]:
    """
    Parse a JSON rule set. The whole document is validated first, so a
    RuleParseError means no rule was produced at all.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RuleParseError(f"导入规则失败: {exc}") from exc
    if not isinstance(data, list):
        raise RuleParseError("规则文件格式错误：必须是数组格式")
    return [_validate_item(i, item) for i, item in enumerate(data)]


def rules_to_json(rules: Iterable[Rule]) -> str:
    return json.dumps([r.to_dict() for r in rules], ensure_ascii=False, indent=2)


def import_rules_json(path: str | os.PathLike) -> List[Rule]:
    p = Path(path)
    try:
        text = p.read_text(encoding=ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"导入规则失败: {p}: {exc}") from exc
    rules = parse_rules_json(text)
    log.info("Imported %d rule(s) from %s", len(rules), p)
    return rules


def export_rules_json(rules: Iterable[Rule],
                      directory: str | os.PathLike,
                      today: _dt.date | None = None) -> str:
    """Write rules to <directory>/typo-rules-YYYY-MM-DD.json and return the path."""
    day = (today or _dt.date.today()).isoformat()
    out = Path(directory) / f"{EXPORT_PREFIX}{day}.json"
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(rules_to_json(rules), encoding="utf-8")
    except OSError as exc:
        raise FileAccessError(f"导出规则失败: {out}: {exc}") from exc
    log.info("Exported rules to %s", out)
    return str(out)
