from pathlib import Path
import pytest
from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from typocheck.docx_bridge import default_output_path, docx_to_text, is_docx_file, text_to_docx
from typocheck.engine import Engine
from typocheck.errors import DocxConversionError


def _seed(tmp: Path) -> Path:
    path = tmp / "报告.docx"
    doc = Document()
    doc.add_paragraph("标题")
    p = doc.add_paragraph("请按装")
    p.add_run("软件").bold = True
    doc.add_paragraph("去渡假")
    doc.save(str(path))
    return path


def test_docx_helpers(tmp_path: Path):
    assert is_docx_file("a.DOCX") and not is_docx_file("a.doc")
    assert Path(default_output_path(tmp_path / "报告.docx")).name == "报告_修正后.docx"


def test_docx_to_text_one_line_per_paragraph(tmp_path: Path):
    assert docx_to_text(_seed(tmp_path)) == "标题\n请按装软件\n去渡假"


def test_text_to_docx_keeps_unchanged_paragraphs_and_appends_extra_lines(tmp_path: Path):
    src = _seed(tmp_path)
    out = text_to_docx("标题\n请安装软件\n去度假\n新增一行", src)
    assert Path(out).name == "报告_修正后.docx"
    doc = Document(out)
    assert [p.text for p in doc.paragraphs] == ["标题", "请安装软件", "去度假", "新增一行"]
    assert docx_to_text(src) == "标题\n请按装软件\n去渡假"


def test_invalid_docx_raises_conversion_error(tmp_path: Path):
    bogus = tmp_path / "bogus.docx"
    bogus.write_text("not a zip", encoding="utf-8")
    with pytest.raises(DocxConversionError):
        docx_to_text(bogus)


@pytest.mark.e2e
def test_engine_fix_file_exports_corrected_docx(tmp_path: Path):
    src = _seed(tmp_path)
    eng = Engine()
    try:
        rows = eng.check_file(src)
        assert [(r.original, r.line, r.column) for r in rows] == [("按装", 1, 1), ("渡假", 2, 1)]
        out = eng.fix_file(src)
        assert docx_to_text(out) == "标题\n请安装软件\n去度假"
        assert eng.check_file(out) == []
    finally:
        eng.shutdown()


def _seed_with_break_and_link(tmp: Path) -> Path:
    path = tmp / "换行.docx"
    doc = Document()
    p = doc.add_paragraph("第一段")
    p.runs[0].add_break()
    p.add_run("同段")
    doc.add_paragraph("请按装")

    linked = doc.add_paragraph("见")
    link = OxmlElement("w:hyperlink")
    link.set(qn("w:anchor"), "top")
    r = OxmlElement("w:r")
    t = OxmlElement("w:t")
    t.text = "渡假指南"
    r.append(t)
    link.append(r)
    linked._p.append(link)

    doc.add_paragraph("结尾")
    doc.save(str(path))
    return path


@pytest.mark.e2e
def test_fix_file_keeps_soft_breaks_and_hyperlink_paragraphs(tmp_path: Path):
    src = _seed_with_break_and_link(tmp_path)
    assert docx_to_text(src) == "第一段\n同段\n请按装\n见渡假指南\n结尾"
    eng = Engine()
    try:
        out = eng.fix_file(src)
    finally:
        eng.shutdown()
    assert [p.text for p in Document(out).paragraphs] == ["第一段\n同段", "请安装", "见度假指南", "结尾"]


def test_text_to_docx_maps_lines_onto_paragraphs_with_soft_breaks(tmp_path: Path):
    src = _seed_with_break_and_link(tmp_path)
    out = text_to_docx("第一段\n同段\n请安装\n见度假指南\n结尾", src, tmp_path / "out.docx")
    assert [p.text for p in Document(out).paragraphs] == ["第一段\n同段", "请安装", "见度假指南", "结尾"]
