import pytest
from typocheck.automaton import PhraseAutomaton


def test_reports_all_hits_ordered_by_end_longest_first():
    ac = PhraseAutomaton.from_phrases(["he", "she", "his", "hers"])
    assert list(ac.iter_matches("ushers")) == [(1, "she"), (2, "he"), (2, "hers")]


def test_ignores_empty_and_duplicate_phrases():
    ac = PhraseAutomaton()
    assert ac.add("ab") is True
    assert ac.add("ab") is False
    assert ac.add("") is False
    ac.build()
    assert len(ac) == 1 and "ab" in ac


def test_no_phrases_no_matches():
    assert list(PhraseAutomaton.from_phrases([]).iter_matches("anything")) == []


def test_cannot_add_after_build():
    ac = PhraseAutomaton.from_phrases(["x"])
    with pytest.raises(RuntimeError):
        ac.add("y")


def test_failure_links_recover_partial_matches():
    ac = PhraseAutomaton.from_phrases(["因为因为", "为他"])
    assert list(ac.iter_matches("因为因为他")) == [(0, "因为因为"), (3, "为他")]
