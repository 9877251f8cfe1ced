from __future__ import annotations

from leagueboards.pipeline.names import build_name_index, name_tokens, names_match, normalize_name


def test_normalize_name_strips_accents_and_punctuation():
    assert normalize_name("Club América") == "club america"
    assert normalize_name("Atlético-Madrid ") == "atletico madrid"
    assert normalize_name(None) == ""


def test_name_tokens_drop_club_noise():
    assert name_tokens("Club America") == frozenset({"america"})
    assert name_tokens("FC") == frozenset({"fc"})


def test_names_match_aliases():
    assert names_match("America", "Club América")
    assert names_match("Manchester United", "Manchester United FC")
    assert names_match("Bayern München", "Bayern Munchen")


def test_names_match_rejects_different_clubs():
    assert not names_match("Manchester United", "Manchester City")
    assert not names_match("Real Madrid", "Real Sociedad")
    assert not names_match("Arsenal", "")


def test_build_name_index_collects_ids_per_name():
    index = build_name_index([("Club América", 2287), ("Club America", 2289), ("Pumas", None)])

    assert index == {"club america": {2287, 2289}}
