"""
Word (.docx) bridge.

Text is extracted paragraph by paragraph (paragraphs joined with "\n"; a soft
line break inside a paragraph also reads as "\n"). Corrections are written
back per paragraph into a copy of the document, keeping the formatting of the
paragraph's first run.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.text.run import Run

from .config import DOCX_EXT, DOCX_OUTPUT_SUFFIX
from .errors import DocxConversionError

log = logging.getLogger(__name__)


def is_docx_file(path: str | os.PathLike) -> bool:
    return Path(path).suffix.lower() == DOCX_EXT


def docx_to_text(path: str | os.PathLike) -> str:
    """Return the body text of a .docx file, paragraphs joined with "\n"."""
    try:
        doc = Document(str(path))
    except (OSError, PackageNotFoundError, ValueError, KeyError) as exc:
        raise DocxConversionError(f"无法转换 DOCX 文件: {path}: {exc}") from exc
    return "\n".join(p.text for p in doc.paragraphs)


def _text_runs(paragraph) -> List[Run]:
    # paragraph.runs leaves out runs nested in hyperlinks
    return [Run(r, paragraph) for r in paragraph._p.xpath("./w:r | ./w:hyperlink/w:r")]


def _set_paragraph_text(paragraph, text: str) -> None:
    """
    Replace the paragraph's text, keeping the formatting of its first run.
    Run.text turns "\\n" back into a soft line break.
    """
    runs = _text_runs(paragraph)
    if not runs:
        paragraph.add_run(text)
        return
    runs[0].text = text
    for run in runs[1:]:
        run.text = ""


def default_output_path(template_path: str | os.PathLike) -> str:
    p = Path(template_path)
    return str(p.with_name(f"{p.stem}{DOCX_OUTPUT_SUFFIX}{p.suffix}"))


def _open(path: str | os.PathLike):
    try:
        return Document(str(path))
    except (OSError, PackageNotFoundError, ValueError, KeyError) as exc:
        raise DocxConversionError(f"导出Word文档失败: {path}: {exc}") from exc


def _save(doc, out: str, changed: int) -> str:
    try:
        doc.save(out)
    except OSError as exc:
        raise DocxConversionError(f"导出Word文档失败: {out}: {exc}") from exc
    log.info("Wrote %s (%d paragraph(s) changed)", out, changed)
    return out


def fix_docx(template_path: str | os.PathLike,
             transform: Callable[[str], str],
             output_path: Optional[str | os.PathLike] = None) -> str:
    """
    Apply `transform` to the text of each paragraph of `template_path` and
    save the result; only paragraphs whose text changes are rewritten.
    """
    out = str(output_path) if output_path else default_output_path(template_path)
    doc = _open(template_path)
    changed = 0
    for paragraph in doc.paragraphs:
        before = paragraph.text
        after = transform(before)
        if after != before:
            _set_paragraph_text(paragraph, after)
            changed += 1
    return _save(doc, out, changed)


def text_to_docx(text: str,
                 template_path: str | os.PathLike,
                 output_path: Optional[str | os.PathLike] = None) -> str:
    """
    Write `text` (as produced by docx_to_text, possibly edited) into a copy
    of `template_path` and return the output path.

    Lines are handed out to the template's paragraphs in order; a paragraph
    with k soft line breaks takes k + 1 lines. Unchanged paragraphs are left
    untouched and lines beyond the template are appended as new paragraphs.
    The output defaults to "<name>_修正后.docx" next to the template.
    """
    out = str(output_path) if output_path else default_output_path(template_path)
    doc = _open(template_path)

    lines = text.split("\n")
    pos = changed = 0
    for paragraph in doc.paragraphs:
        if pos >= len(lines):
            break
        current = paragraph.text
        take = current.count("\n") + 1
        new = "\n".join(lines[pos:pos + take])
        pos += take
        if new != current:
            _set_paragraph_text(paragraph, new)
            changed += 1
    for line in lines[pos:]:
        doc.add_paragraph(line)
        changed += 1
    return _save(doc, out, changed)
