from __future__ import annotations

import re
import unicodedata
from typing import Iterable

DEFAULT_MATCH_THRESHOLD = 0.6

# Club-type tokens that carry no identity ("Club America" == "America").
NOISE_TOKENS = frozenset({"fc", "cf", "sc", "ac", "afc", "cd", "ca", "club", "de", "the", "calcio", "sv", "vfl"})

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(value: str | None) -> str:
    if not value:
        return ""
    lowered = strip_diacritics(value).lower()
    return _NON_ALNUM.sub(" ", lowered).strip()


def name_tokens(value: str | None) -> frozenset[str]:
    tokens = [token for token in normalize_name(value).split(" ") if token]
    meaningful = [token for token in tokens if token not in NOISE_TOKENS]
    return frozenset(meaningful or tokens)


def token_overlap(left: frozenset[str], right: frozenset[str]) -> float:
    if not left or not right:
        return 0.0
    shared = len(left & right)
    return max(shared / len(left), shared / len(right))


def names_match(left: str | None, right: str | None, *, threshold: float = DEFAULT_MATCH_THRESHOLD) -> bool:
    normalized_left = normalize_name(left)
    normalized_right = normalize_name(right)
    if not normalized_left or not normalized_right:
        return False
    if normalized_left == normalized_right:
        return True

    left_tokens = name_tokens(left)
    right_tokens = name_tokens(right)
    if not left_tokens or not right_tokens:
        return False
    if left_tokens <= right_tokens or right_tokens <= left_tokens:
        return True
    return token_overlap(left_tokens, right_tokens) > threshold


def build_name_index(pairs: Iterable[tuple[str, int | None]]) -> dict[str, set[int]]:
    """Map normalized participant names to every ID observed for them."""
    index: dict[str, set[int]] = {}
    for name, team_id in pairs:
        normalized = normalize_name(name)
        if not normalized or team_id is None:
            continue
        index.setdefault(normalized, set()).add(team_id)
    return index
