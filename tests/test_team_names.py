import pytest

from pickbook.services.team_logos import espn_logo_url, no_logo, resolve_logo_lookup
from pickbook.services.team_names import names_overlap, normalize_team_name

SAMPLES = [
    "Philadelphia Eagles",
    "  San José   State-Spartans ",
    "Texas A&M Aggies",
    "Michigan St. Spartans",
    "St. John's",
    "Miami (OH) RedHawks",
    "İstanbul",
    "Hawaiʻi Rainbow Warriors",
    "Ⅸ Legion",
    "",
]


@pytest.mark.parametrize("sport", ["nfl", "cfb"])
@pytest.mark.parametrize("name", SAMPLES)
def test_normalize_is_idempotent(name, sport):
    once = normalize_team_name(name, sport)
    assert normalize_team_name(once, sport) == once


def test_normalize_rules():
    assert normalize_team_name("  San José   State-Spartans ") == "san jose state spartans"
    assert normalize_team_name("Texas A&M Aggies") == "texas a and m aggies"
    assert normalize_team_name("L.A. Rams") == "la rams"
    assert normalize_team_name(None) == ""


def test_cfb_folds_st_abbreviation():
    assert normalize_team_name("Michigan St. Spartans", "cfb") == "michigan state spartans"
    assert normalize_team_name("Michigan St. Spartans", "nfl") == "michigan st spartans"
    # only a standalone "st." is folded
    assert normalize_team_name("Northeast. Tech", "cfb") == "northeast tech"


def test_names_overlap_is_bidirectional():
    assert names_overlap("eagles", "philadelphia eagles")
    assert names_overlap("philadelphia eagles", "eagles")
    assert not names_overlap("eagles", "dallas cowboys")
    assert not names_overlap("", "dallas cowboys")


def test_espn_logo_lookup():
    assert espn_logo_url("Dallas Cowboys", "nfl") == "https://a.espncdn.com/i/teamlogos/nfl/500/dal.png"
    assert espn_logo_url("Texas A&M Aggies", "cfb") == "https://a.espncdn.com/i/teamlogos/ncaa/500/245.png"
    assert espn_logo_url("Mississippi Rebels", "cfb") == "https://a.espncdn.com/i/teamlogos/ncaa/500/145.png"
    assert espn_logo_url("Nowhere Nobodies", "nfl") is None


def test_logo_lookup_is_chosen_once():
    assert resolve_logo_lookup("espn") is espn_logo_url
    assert resolve_logo_lookup("off") is no_logo
    assert resolve_logo_lookup("bogus") is no_logo
    assert no_logo("Dallas Cowboys", "nfl") is None
