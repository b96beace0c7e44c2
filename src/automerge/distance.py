from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

# Multi-glyph sequences first, then single glyphs.
_CONFUSABLE_SEQUENCES = (("rn", "m"), ("vv", "w"), ("cl", "d"))
_CONFUSABLE_GLYPHS = str.maketrans(
    {
        "0": "O",
        "1": "l",
        "I": "l",
        "|": "l",
        "5": "S",
        "8": "B",
        "2": "Z",
    }
)

# Glyph pairs that differ by a stroke or two; substituting one for the other
# costs half an edit in the visual metric.
_NEAR_GLYPH_PAIRS = frozenset(
    frozenset(pair)
    for pair in ("ce", "hn", "uv", "il", "ij", "ao", "gq", "pq", "CG", "OQ", "EF", "PR")
)
_NEAR_GLYPH_COST = 0.5


def damerau_levenshtein(a: str, b: str) -> int:
    """Optimal string alignment distance (adjacent transpositions count as one edit)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev_prev: list[int] = []
    prev = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        row = [i] + [0] * len(b)
        for j in range(1, len(b) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            row[j] = min(prev[j] + 1, row[j - 1] + 1, prev[j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                row[j] = min(row[j], prev_prev[j - 2] + 1)
        prev_prev, prev = prev, row
    return prev[len(b)]


def visual_skeleton(name: str) -> str:
    out = name
    for seq, replacement in _CONFUSABLE_SEQUENCES:
        out = out.replace(seq, replacement)
    return out.translate(_CONFUSABLE_GLYPHS)


def _substitution_cost(x: str, y: str) -> float:
    if x == y:
        return 0.0
    if frozenset((x, y)) in _NEAR_GLYPH_PAIRS:
        return _NEAR_GLYPH_COST
    return 1.0


def visual_distance(a: str, b: str) -> float:
    """Edit distance between visual skeletons, where near-glyph swaps cost half an edit.

    Confusable sequences and glyphs are folded first, so ``Modern`` and
    ``Modem`` are at distance 0; ``Bean`` and ``Bcah`` are at 1.0.
    """
    a, b = visual_skeleton(a), visual_skeleton(b)
    if a == b:
        return 0.0

    prev_prev: list[float] = []
    prev = [float(j) for j in range(len(b) + 1)]
    for i in range(1, len(a) + 1):
        row = [float(i)] + [0.0] * len(b)
        for j in range(1, len(b) + 1):
            row[j] = min(
                prev[j] + 1,
                row[j - 1] + 1,
                prev[j - 1] + _substitution_cost(a[i - 1], b[j - 1]),
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                row[j] = min(row[j], prev_prev[j - 2] + 1)
        prev_prev, prev = prev, row
    return prev[len(b)]


@dataclass(frozen=True, slots=True)
class SimilarName:
    existing: str
    dl: int
    dl_lower: int
    visual: float


def find_similar_names(
    name: str,
    existing: Iterable[str],
    *,
    dl_cutoff: int = 2,
    lower_dl_cutoff: int = 1,
    visual_cutoff: float = 1.5,
) -> list[SimilarName]:
    """Existing names closer to ``name`` than any cutoff allows, an exact match included."""
    similar: list[SimilarName] = []
    for other in sorted(set(existing)):
        hit = SimilarName(
            existing=other,
            dl=damerau_levenshtein(name, other),
            dl_lower=damerau_levenshtein(name.lower(), other.lower()),
            visual=visual_distance(name, other),
        )
        if hit.dl < dl_cutoff or hit.dl_lower < lower_dl_cutoff or hit.visual < visual_cutoff:
            similar.append(hit)
    return similar


def meets_distance_check(name: str, existing: Iterable[str], **cutoffs: float) -> tuple[bool, str]:
    existing = set(existing)
    if name in existing:
        return False, f"Package name {name} already exists in the registry."
    similar = find_similar_names(name, existing, **cutoffs)
    if not similar:
        return True, ""
    lines = [
        f"- {s.existing} (Damerau-Levenshtein {s.dl}, case-insensitive {s.dl_lower}, visual {s.visual:g})"
        for s in similar
    ]
    return False, (
        f"Package name is too similar to {len(similar)} existing package name(s):\n" + "\n".join(lines)
    )
