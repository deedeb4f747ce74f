import datetime as dt
import json
from pathlib import Path
import pytest

from typocheck.engine import Engine
from typocheck.errors import FileAccessError, RuleParseError
from typocheck.loader import export_rules_json, import_rules_json, parse_rules_json
from typocheck.models import Rule


def test_parse_accepts_missing_enabled_flag():
    rules = parse_rules_json('[{"original": "帮忙", "suggestion": "帮助"}, '
                             '{"original": "按装", "suggestion": "安装", "enabled": false}]')
    assert rules == [Rule("帮忙", "帮助", True), Rule("按装", "安装", False)]


@pytest.mark.parametrize("payload", [
    '{"original": "a", "suggestion": "b"}',
    '[{"original": "a"}]',
    '[{"original": "", "suggestion": "b"}]',
    '[{"original": "a", "suggestion": "b"}, 42]',
    '[{"original": "a", "suggestion": "b", "enabled": "yes"}]',
    'not json',
])
def test_parse_rejects_malformed_rule_sets(payload):
    with pytest.raises(RuleParseError):
        parse_rules_json(payload)


def test_export_file_name_and_content(tmp_path: Path):
    rules = [Rule("按装", "安装"), Rule("渡假", "度假", enabled=False)]
    out = export_rules_json(rules, tmp_path, today=dt.date(2024, 3, 9))
    assert Path(out).name == "typo-rules-2024-03-09.json"
    data = json.loads(Path(out).read_text(encoding="utf-8"))
    assert data == [
        {"original": "按装", "suggestion": "安装", "enabled": True},
        {"original": "渡假", "suggestion": "度假", "enabled": False},
    ]
    assert import_rules_json(out) == rules


def test_import_missing_file_raises_file_access_error(tmp_path: Path):
    with pytest.raises(FileAccessError):
        import_rules_json(tmp_path / "missing.json")


@pytest.mark.e2e
def test_engine_import_merges_and_persists(tmp_path: Path):
    src = tmp_path / "shared.json"
    src.write_text(json.dumps([
        {"original": "帮忙", "suggestion": "帮助", "enabled": True},
        {"original": "按装", "suggestion": "安装", "enabled": False},
    ], ensure_ascii=False), encoding="utf-8")

    eng = Engine()
    try:
        imported = eng.import_rules(src)
        assert len(imported) == 2
        assert eng.index.correction("帮忙") == "帮助"
        assert "按装" not in eng.index
        eng.reload()
        assert eng.index.correction("帮忙") == "帮助"
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_engine_import_of_malformed_set_merges_nothing(tmp_path: Path):
    src = tmp_path / "bad.json"
    src.write_text('[{"original": "帮忙", "suggestion": "帮助"}, {"original": "x"}]', encoding="utf-8")
    eng = Engine()
    try:
        before = eng.rules
        with pytest.raises(RuleParseError):
            eng.import_rules(src)
        assert eng.rules == before
        assert "帮忙" not in eng.index
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_engine_export_then_import_into_fresh_session(tmp_path: Path):
    e1 = Engine(autoload=False)
    e1.add_rule("帮忙", "帮助")
    out = e1.export_rules(tmp_path / "exports")
    e1.shutdown()

    e2 = Engine(autoload=False)
    try:
        e2.import_rules(out)
        assert e2.fix_all("请帮忙") == "请帮助"
    finally:
        e2.shutdown()
