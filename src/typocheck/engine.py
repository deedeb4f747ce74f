# typocheck/engine.py
from __future__ import annotations

import codecs
import os
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

from . import config as CFG
from . import loader
from .corrector import compute_edits, fix_all, fix_one, fix_selected
from .docx_bridge import docx_to_text, fix_docx, is_docx_file
from .errors import NoActiveTarget, FileAccessError
from .index import DictionaryIndex
from .models import Diagnostic, MatchOccurrence, Rule, TextEdit
from .rules import RuleStore
from .scanner import scan, to_diagnostics
from .DB.api import SettingsStore, make_store

log = logging.getLogger(__name__)


def _has_bom(path: str | os.PathLike) -> bool:
    with open(path, "rb") as f:
        return f.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8


class Engine:
    """
    One checking session: owns a RuleStore, the DictionaryIndex derived from
    it, and a SettingsStore for the user's configuration.

    Public API (used by CLI/Flask/GUI):
      * reload():                     rebuild rules from defaults/settings/override file
      * scan(text), diagnostics(text): locate typos in a text snapshot
      * fix_all / fix_selected / fix_one: return corrected text
      * add_rule / remove_rule / set_rule_enabled: edit user rules (persisted)
      * import_rules(path) / export_rules(directory): JSON rule sets
      * check_file / fix_file:        .txt/.md and .docx documents
      * shutdown():                   close the settings store

    Rule precedence (later wins per `original`):
      bundled defaults (if useDefaultRules) -> customRules setting -> override file
      -> ruleStates (enable/disable flags set through set_rule_enabled)

    Storage DSNs (via typocheck.DB.api.make_store):
      - "sqlite:///path/to/settings.sqlite"
      - "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        db_dsn: str = CFG.DEFAULT_DSN,
        *,
        default_dictionary: Optional[str | os.PathLike] = None,
        settings: Optional[dict] = None,
        verbose: bool = False,
        autoload: bool = True,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
        self.default_dictionary = Path(default_dictionary or CFG.DEFAULT_DICTIONARY)
        self._settings: Optional[SettingsStore] = make_store(db_dsn, initial=settings)
        self._store = RuleStore()
        self._index = DictionaryIndex()
        if autoload:
            self.reload()

    # /* ~~~ Rebuild the rule layers; on I/O failure keep the previous rules ~~~ */
    def reload(self) -> None:
        store = RuleStore()
        if self.get_setting(CFG.KEY_USE_DEFAULT_RULES):
            store.merge(loader.load_rule_file(self.default_dictionary))

        store.merge(self.custom_rules())

        override = self.get_setting(CFG.KEY_CUSTOM_DICTIONARY)
        if override:
            if Path(override).exists():
                store.merge(loader.load_rule_file(override))
            else:
                log.info("Override dictionary %s does not exist yet; skipping", override)

        # user enable/disable flags sit above every rule source
        for original, enabled in (self.get_setting(CFG.KEY_RULE_STATES) or {}).items():
            if original in store:
                store.set_enabled(original, enabled)

        self._commit(store)
        log.info("Rules loaded: %d total, %d enabled", len(store), len(self._index))

    def shutdown(self) -> None:
        try:
            if self._settings:
                self._settings.close()
        finally:
            self._settings = None
            log.info("Engine shutdown complete")

    # ------------- settings -------------

    def _require_settings(self) -> SettingsStore:
        if self._settings is None:
            raise RuntimeError("Engine is shut down.")
        return self._settings

    def get_setting(self, key: str, default: Any = None) -> Any:
        fallback = CFG.DEFAULTS.get(key) if default is None else default
        return self._require_settings().get(key, fallback)

    def set_setting(self, key: str, value: Any) -> None:
        self._require_settings().set(key, value)

    def is_enabled(self) -> bool:
        return bool(self.get_setting(CFG.KEY_ENABLED))

    def set_use_default_rules(self, flag: bool) -> None:
        self.set_setting(CFG.KEY_USE_DEFAULT_RULES, bool(flag))
        self.reload()

    def set_custom_dictionary(self, path: Optional[str]) -> None:
        self.set_setting(CFG.KEY_CUSTOM_DICTIONARY, str(path) if path else None)
        self.reload()

    def is_supported(self, path: str | os.PathLike) -> bool:
        if is_docx_file(path):
            return True
        suffix = Path(path).suffix.lower()
        for lang in self.get_setting(CFG.KEY_SUPPORTED_FILE_TYPES) or []:
            if suffix in CFG.LANGUAGE_EXTS.get(lang, []):
                return True
        return False

    # ------------- rules -------------

    @property
    def rules(self) -> List[Rule]:
        return self._store.to_list()

    @property
    def index(self) -> DictionaryIndex:
        return self._index

    def custom_rules(self) -> List[Rule]:
        raw = self.get_setting(CFG.KEY_CUSTOM_RULES) or []
        return [Rule.from_dict(r) for r in raw if r.get("original") and r.get("suggestion")]

    def _save_custom_rules(self, rules: Iterable[Rule]) -> None:
        self.set_setting(CFG.KEY_CUSTOM_RULES, [r.to_dict() for r in rules])

    def _commit(self, store: RuleStore) -> None:
        self._store = store
        self._index = DictionaryIndex.rebuild(store)

    def merge_rules(self, incoming: Iterable[Rule], *, persist: bool = True) -> None:
        """Merge rules into the session (and into customRules when `persist`)."""
        incoming = list(incoming)
        store = self._store.copy().merge(incoming)
        if persist:
            custom = RuleStore(self.custom_rules()).merge(incoming)
            self._save_custom_rules(custom)
            # an explicitly merged rule carries its own enabled flag
            states = self.get_setting(CFG.KEY_RULE_STATES) or {}
            keys = {r.original for r in incoming}
            if keys & states.keys():
                self.set_setting(CFG.KEY_RULE_STATES, {k: v for k, v in states.items() if k not in keys})
        self._commit(store)

    def add_rule(self, original: str, suggestion: str, enabled: bool = True) -> Rule:
        if not original or not suggestion:
            raise ValueError("add_rule(): original and suggestion must be non-empty")
        rule = Rule(original=original, suggestion=suggestion, enabled=enabled)
        self.merge_rules([rule])
        return rule

    def set_rule_enabled(self, original: str, enabled: bool) -> Rule:
        """
        Enable or disable an existing rule. The flag is stored under
        `ruleStates` and applied after the override file on every reload,
        so it also holds for rules that only the override file defines.
        """
        if self._store.find(original) is None:
            raise KeyError(original)
        states = dict(self.get_setting(CFG.KEY_RULE_STATES) or {})
        states[original] = bool(enabled)
        self.set_setting(CFG.KEY_RULE_STATES, states)
        store = self._store.copy()
        rule = store.set_enabled(original, enabled)
        self._commit(store)
        return rule

    def remove_rule(self, original: str) -> bool:
        """
        Drop a user rule. A rule that also exists in a lower layer (e.g. the
        bundled defaults) comes back from that layer; disable it instead to
        suppress it.
        """
        custom = RuleStore(self.custom_rules())
        removed = custom.remove(original) is not None
        if removed:
            self._save_custom_rules(custom)
            self.reload()
        return removed

    def import_rules(self, path: str | os.PathLike) -> List[Rule]:
        rules = loader.import_rules_json(path)   # raises before anything is merged
        self.merge_rules(rules)
        log.info("Imported %d rule(s); store now holds %d", len(rules), len(self._store))
        return rules

    def export_rules(self, directory: str | os.PathLike) -> str:
        return loader.export_rules_json(self._store, directory)

    def save_dictionary(self, path: str | os.PathLike) -> str:
        return loader.write_rule_file(path, self._store)

    # ------------- scanning / correcting -------------

    @staticmethod
    def _require_text(text: Optional[str]) -> str:
        if text is None:
            raise NoActiveTarget("没有打开的编辑器")
        return text

    def scan(self, text: Optional[str]) -> List[MatchOccurrence]:
        return scan(self._require_text(text), self._index)

    def diagnostics(self, text: Optional[str]) -> List[Diagnostic]:
        return to_diagnostics(self.scan(text))

    def edits(self, text: Optional[str], occurrences: Optional[Iterable[MatchOccurrence]] = None) -> List[TextEdit]:
        text = self._require_text(text)
        occ = self.scan(text) if occurrences is None else occurrences
        return compute_edits(text, occ)

    def fix_all(self, text: Optional[str]) -> str:
        text = self._require_text(text)
        return fix_all(text, self.scan(text))

    def fix_selected(self, text: Optional[str], selected: Iterable[MatchOccurrence]) -> str:
        return fix_selected(self._require_text(text), selected)

    def fix_one(self, text: Optional[str], original: str, suggestion: str) -> str:
        return fix_one(self._require_text(text), original, suggestion)

    # ------------- documents -------------

    def read_document(self, path: str | os.PathLike) -> str:
        if is_docx_file(path):
            return docx_to_text(path)
        try:
            # newline="" keeps \r\n intact so offsets match the file
            with open(path, encoding=CFG.ENCODING, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise FileAccessError(f"无法读取文件: {path}: {exc}") from exc

    def check_file(self, path: str | os.PathLike) -> List[MatchOccurrence]:
        return self.scan(self.read_document(path))

    def fix_file(self, path: str | os.PathLike, output: Optional[str | os.PathLike] = None) -> str:
        """
        Correct every typo in a document and return the written path.
        Text files are rewritten in place unless `output` is given, keeping
        a leading BOM if the source had one. Word files are corrected one
        paragraph at a time and exported next to the source as
        "<name>_修正后.docx".
        """
        if is_docx_file(path):
            return fix_docx(path, self.fix_all, output)
        text = self.read_document(path)
        fixed = self.fix_all(text)
        encoding = CFG.ENCODING if _has_bom(path) else "utf-8"
        out = Path(output or path)
        try:
            with open(out, "w", encoding=encoding, newline="") as f:
                f.write(fixed)
        except OSError as exc:
            raise FileAccessError(f"无法写入文件: {out}: {exc}") from exc
        return str(out)
