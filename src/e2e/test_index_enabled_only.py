from typocheck.index import DictionaryIndex
from typocheck.models import Rule
from typocheck.rules import RuleStore


def test_index_contains_exactly_enabled_pairs():
    rules = [Rule("按装", "安装"), Rule("暴燥", "暴躁", enabled=False), Rule("渡假", "度假")]
    idx = DictionaryIndex.rebuild(rules)
    assert idx.as_dict() == {"按装": "安装", "渡假": "度假"}
    assert idx.is_typo("按装") and not idx.is_typo("暴燥")
    assert idx.correction("渡假") == "度假"
    assert idx.correction("暴燥") is None


def test_disabling_removes_from_index_but_not_store():
    store = RuleStore([Rule("按装", "安装"), Rule("渡假", "度假")])
    store.set_enabled("按装", False)
    idx = DictionaryIndex.rebuild(store)
    assert "按装" not in idx
    assert store.find("按装") is not None


def test_later_duplicate_wins_and_empty_input():
    idx = DictionaryIndex.rebuild([Rule("a", "1"), Rule("a", "2")])
    assert idx["a"] == "2"
    assert len(DictionaryIndex.rebuild([])) == 0


def test_empty_trigger_is_never_indexed():
    idx = DictionaryIndex({"": "x", "ab": "c"})
    assert list(idx) == ["ab"]
    assert len(idx.automaton) == 1
