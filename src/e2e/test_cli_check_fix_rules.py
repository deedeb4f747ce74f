import io
import json
from pathlib import Path
import pytest

from typocheck.__main__ import main


def _seed(tmp: Path) -> Path:
    doc = tmp / "note.txt"
    doc.write_text("请按装软件\n去渡假\n", encoding="utf-8")
    return doc


@pytest.mark.e2e
def test_cli_check_json(tmp_path: Path, capsys):
    doc = _seed(tmp_path)
    assert main(["--check", str(doc), "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    rows = report[str(doc)]
    assert [(r["original"], r["suggestion"], r["line"], r["column"]) for r in rows] == [
        ("按装", "安装", 0, 1), ("渡假", "度假", 1, 1),
    ]


@pytest.mark.e2e
def test_cli_check_table_and_stdin(tmp_path: Path, capsys, monkeypatch):
    doc = _seed(tmp_path)
    assert main(["--check", str(doc)]) == 0
    out = capsys.readouterr().out
    assert "发现 2 个错别字" in out and "按装 → 安装" in out

    monkeypatch.setattr("sys.stdin", io.StringIO("没有问题"))
    assert main(["--check", "-"]) == 0
    assert "未发现错别字" in capsys.readouterr().out


@pytest.mark.e2e
def test_cli_fix_to_output_and_stdout(tmp_path: Path, capsys):
    doc = _seed(tmp_path)
    out = tmp_path / "fixed.txt"
    assert main(["--fix", str(doc), "--output", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "请安装软件\n去度假\n"
    assert "已修正 2 处" in capsys.readouterr().out

    assert main(["--fix", str(doc), "--stdout"]) == 0
    assert capsys.readouterr().out == "请安装软件\n去度假\n"


@pytest.mark.e2e
def test_cli_rules_persist_in_sqlite(tmp_path: Path, capsys):
    db = ["--db", f"sqlite:///{tmp_path / 'settings.sqlite'}"]
    assert main(["--add-rule", "帮忙", "帮助", *db]) == 0
    assert main(["--disable-rule", "渡假", *db]) == 0
    capsys.readouterr()

    assert main(["--list-rules", "--json", *db]) == 0
    rules = {r["original"]: r for r in json.loads(capsys.readouterr().out)}
    assert rules["帮忙"]["suggestion"] == "帮助"
    assert rules["渡假"]["enabled"] is False

    assert main(["--enable-rule", "无此词", *db]) == 1
    assert "未找到规则" in capsys.readouterr().err


@pytest.mark.e2e
def test_cli_import_export(tmp_path: Path, capsys):
    src = tmp_path / "in.json"
    src.write_text('[{"original": "帮忙", "suggestion": "帮助"}]', encoding="utf-8")
    assert main(["--import-rules", str(src), "--no-defaults"]) == 0
    assert "规则导入成功: 1 条" in capsys.readouterr().out

    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")
    assert main(["--import-rules", str(bad)]) == 1
    assert "数组" in capsys.readouterr().err

    assert main(["--export-rules", str(tmp_path / "exp"), "--no-defaults"]) == 0
    assert list((tmp_path / "exp").glob("typo-rules-*.json"))


def test_cli_errors_map_to_exit_codes(tmp_path: Path, capsys):
    assert main(["--check"]) == 2
    assert main(["--check", str(tmp_path / "missing.txt")]) == 1
    err = capsys.readouterr().err
    assert "没有要检查的文件" in err and "无法读取文件" in err
