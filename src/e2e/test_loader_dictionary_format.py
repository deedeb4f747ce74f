from pathlib import Path
import pytest

from typocheck.errors import FileAccessError
from typocheck.loader import load_rule_file, parse_rules, serialize_rules, write_rule_file
from typocheck.models import Rule


def test_parse_skips_comments_blank_and_malformed_lines():
    text = (
        "# 注释：不是规则\n"
        "\n"
        "按装：安装\n"
        "  暴燥 ： 暴躁  \n"
        "没有分隔符的行\n"
        "：缺少错误词\n"
        "缺少正确词：\n"
        "half:width\n"
    )
    assert parse_rules(text) == [Rule("按装", "安装"), Rule("暴燥", "暴躁")]


def test_parse_uses_first_two_pieces_of_a_line():
    assert parse_rules("甲：乙：丙") == [Rule("甲", "乙")]


def test_parsed_rules_are_enabled():
    assert all(r.enabled for r in parse_rules("a：b\nc：d\n"))


def test_serialize_round_trip_defaults_enabled_to_true():
    rules = [Rule("按装", "安装"), Rule("渡假", "度假", enabled=False)]
    back = parse_rules(serialize_rules(rules))
    assert back == [Rule("按装", "安装"), Rule("渡假", "度假", enabled=True)]


def test_load_rule_file_tolerates_bom_and_crlf(tmp_path: Path):
    f = tmp_path / "dict.txt"
    f.write_bytes("\ufeff按装：安装\r\n渡假：度假\r\n".encode("utf-8"))
    assert load_rule_file(f) == [Rule("按装", "安装"), Rule("渡假", "度假")]


def test_load_rule_file_missing_raises_file_access_error(tmp_path: Path):
    with pytest.raises(FileAccessError):
        load_rule_file(tmp_path / "nope.txt")


def test_write_rule_file_then_load(tmp_path: Path):
    out = write_rule_file(tmp_path / "sub" / "custom.txt", [Rule("既使", "即使")])
    assert load_rule_file(out) == [Rule("既使", "即使")]
