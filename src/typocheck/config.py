from __future__ import annotations
from pathlib import Path

# package root: src/typocheck/
PACKAGE_ROOT = Path(__file__).resolve().parent

# bundled default dictionary (one "错误词：正确词" per line)
DEFAULT_DICTIONARY = PACKAGE_ROOT / "data" / "typo_dict.txt"
ENCODING = "utf-8-sig"

# rule file syntax
SEPARATOR = "："       # full-width colon "："
COMMENT_PREFIX = "#"

# settings keys (mirrors the editor configuration section)
KEY_ENABLED = "enabled"
KEY_USE_DEFAULT_RULES = "useDefaultRules"
KEY_CUSTOM_RULES = "customRules"
KEY_CUSTOM_DICTIONARY = "customDictionaryPath"
KEY_HIGHLIGHT_ENABLED = "highlight.enabled"
KEY_HIGHLIGHT_COLOR = "highlight.color"
KEY_SUPPORTED_FILE_TYPES = "supportedFileTypes"
KEY_RULE_STATES = "ruleStates"

DEFAULTS = {
    KEY_ENABLED: True,
    KEY_USE_DEFAULT_RULES: True,
    KEY_CUSTOM_RULES: [],
    KEY_CUSTOM_DICTIONARY: None,
    KEY_HIGHLIGHT_ENABLED: True,
    KEY_HIGHLIGHT_COLOR: "#ffd700",
    KEY_SUPPORTED_FILE_TYPES: ["markdown", "plaintext"],
    KEY_RULE_STATES: {},
}

# language id -> file extensions
LANGUAGE_EXTS = {
    "markdown": [".md", ".markdown"],
    "plaintext": [".txt", ".text"],
}
DOCX_EXT = ".docx"

# default settings store
DEFAULT_DSN = "memory://"

# import/export
EXPORT_PREFIX = "typo-rules-"
DOCX_OUTPUT_SUFFIX = "_修正后"

# diagnostics
DIAGNOSTIC_SOURCE = "中文错别字检查"
DIAGNOSTIC_CODE = "chinese-typo"
DIAGNOSTIC_SEVERITY = "warning"
DIAGNOSTIC_MESSAGE = "建议修改为：{suggestion}"
