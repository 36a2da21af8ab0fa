# pickbook/services/team_names.py
from __future__ import annotations

import re
import unicodedata

_CFB_SAINT_STATE = re.compile(r"\bst\.")
_SEPARATORS = re.compile(r"[\s\-]+")


def _strip_diacritics(s: str) -> str:
    return "".join(ch for ch in unicodedata.normalize("NFKD", s) if not unicodedata.combining(ch))


def normalize_team_name(name: str | None, sport: str = "nfl") -> str:
    """
    Canonical form used to compare feed and schedule team names.

      "San José  State-Spartans"  -> "san jose state spartans"
      "Texas A&M Aggies"          -> "texas a and m aggies"
      "Michigan St. Spartans"     -> "michigan state spartans"   (cfb only)

    Idempotent: normalize(normalize(x)) == normalize(x).
    """
    s = _strip_diacritics(name or "").lower()
    # lowercasing can reintroduce combining marks (e.g. "İ")
    s = _strip_diacritics(s)
    if sport == "cfb":
        s = _CFB_SAINT_STATE.sub("state", s)
    s = s.replace("&", " and ").replace(".", "")
    return _SEPARATORS.sub(" ", s).strip()


def names_overlap(a: str, b: str) -> bool:
    """Bidirectional substring test on already-normalized names."""
    if not a or not b:
        return False
    return a in b or b in a
