from typocheck.index import DictionaryIndex
from typocheck.models import Rule
from typocheck.scanner import LineIndex, check_text, scan, summarize, to_diagnostic, to_diagnostics


def _idx(mapping: dict) -> DictionaryIndex:
    return DictionaryIndex.rebuild(Rule(k, v) for k, v in mapping.items())


def test_empty_text_has_no_occurrences():
    assert scan("", _idx({"帮忙": "帮助"})) == []


def test_single_match_offset_and_position():
    rows = scan("请帮忙处理", _idx({"帮忙": "帮助"}))
    assert len(rows) == 1
    r = rows[0]
    assert (r.original, r.suggestion) == ("帮忙", "帮助")
    assert r.start_offset == 1 and r.length == 2 and r.end_offset == 3
    assert (r.line, r.column) == (0, 1)


def test_end_to_end_example_is_sorted_by_offset():
    rows = scan("因为因为他的的错", _idx({"的的": "的", "因为因为": "因为"}))
    assert [(r.original, r.suggestion, r.start_offset) for r in rows] == [
        ("因为因为", "因为", 0),
        ("的的", "的", 5),
    ]


def test_overlapping_triggers_are_both_reported():
    rows = scan("ABC", _idx({"AB": "X", "BC": "Y"}))
    assert [(r.original, r.start_offset) for r in rows] == [("AB", 0), ("BC", 1)]


def test_a_trigger_does_not_overlap_itself():
    assert [r.start_offset for r in scan("aaaa", _idx({"aa": "b"}))] == [0, 2]
    assert [r.start_offset for r in scan("的的的", _idx({"的的": "的"}))] == [0]


def test_triggers_are_matched_literally():
    idx = _idx({"a.b*": "ab", "(x)": "x", "[y]": "y"})
    rows = scan("a.b* axb* (x) x [y]", idx)
    assert [(r.original, r.start_offset) for r in rows] == [("a.b*", 0), ("(x)", 10), ("[y]", 16)]


def test_nested_triggers_share_an_offset():
    rows = scan("穿流不息", _idx({"穿流": "川流", "穿流不息": "川流不息"}))
    assert [(r.original, r.start_offset) for r in rows] == [("穿流", 0), ("穿流不息", 0)]


def test_positions_across_crlf_lf_and_cr():
    text = "第一行\r\n第二行帮忙\n帮忙\r帮忙"
    rows = scan(text, _idx({"帮忙": "帮助"}))
    assert [(r.start_offset, r.line, r.column) for r in rows] == [(8, 1, 3), (11, 2, 0), (14, 3, 0)]


def test_line_index_round_trip_and_clamping():
    li = LineIndex("ab\ncd")
    assert li.line_count == 2
    assert li.offset_to_position(4) == (1, 1)
    assert li.position_to_offset(1, 1) == 4
    assert li.offset_to_position(99) == (1, 2)
    assert li.position_to_offset(7, 0) == 5


def test_diagnostic_mapping_is_one_to_one():
    rows = scan("请帮忙处理，帮忙", _idx({"帮忙": "帮助"}))
    diags = to_diagnostics(rows)
    assert len(diags) == len(rows) == 2
    d = to_diagnostic(rows[0])
    assert (d.line, d.column, d.end_line, d.end_column) == (0, 1, 0, 3)
    assert d.message == "建议修改为：帮助"
    assert d.severity == "warning"
    assert d.code == "chinese-typo"


def test_check_text_and_summary():
    idx = _idx({"的的": "的", "按装": "安装"})
    text = "按装的的软件，再按装"
    assert check_text(text, idx) == [("按装", "安装"), ("的的", "的"), ("按装", "安装")]
    assert summarize(scan(text, idx)) == {"按装": 2, "的的": 1}
