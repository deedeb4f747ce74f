from __future__ import annotations


class TypoCheckError(Exception):
    """Base class for every error raised by the typo checker."""


class FileAccessError(TypoCheckError, OSError):
    """A dictionary, rule set or document file could not be read or written."""


class RuleParseError(TypoCheckError, ValueError):
    """An imported rule set is malformed; nothing was merged."""


class NoActiveTarget(TypoCheckError):
    """There is no document or text to operate on."""


class DocxConversionError(TypoCheckError):
    """A Word document could not be converted to or from text."""
