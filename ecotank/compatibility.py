"""
Pairwise species compatibility.

Rules are sparse: only listed pairs carry a score. Pairs are canonicalized
(lexicographic order of ids) so lookups are symmetric.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from .data_types import CompatibilityRule
from .constants import DEFAULT_COMPATIBILITY_SCORE


CompatibilityLookup = Mapping[str, float]


DEFAULT_COMPATIBILITY_RULES = (
    CompatibilityRule("neon_tetra", "guppy", 0.76),
    CompatibilityRule("neon_tetra", "corydoras", 0.9),
    CompatibilityRule("neon_tetra", "dwarf_gourami", 0.44),
    CompatibilityRule("neon_tetra", "cherry_barb", 0.68),
    CompatibilityRule("guppy", "corydoras", 0.82),
    CompatibilityRule("guppy", "dwarf_gourami", 0.36),
    CompatibilityRule("guppy", "cherry_barb", 0.54),
    CompatibilityRule("corydoras", "dwarf_gourami", 0.56),
    CompatibilityRule("corydoras", "cherry_barb", 0.72),
    CompatibilityRule("dwarf_gourami", "cherry_barb", 0.34),
)


def pair_key(species_a: str, species_b: str) -> str:
    """Canonical key for an unordered species pair"""
    if species_a < species_b:
        return f"{species_a}|{species_b}"
    return f"{species_b}|{species_a}"


def build_compatibility_lookup(rules: Iterable[CompatibilityRule]) -> CompatibilityLookup:
    """
    Build a read-only lookup from compatibility rules.

    Later rules for the same pair override earlier ones.

    Raises:
        ValueError: If a score is outside [0, 1]
    """
    lookup = {}
    for rule in rules:
        if not 0.0 <= rule.score <= 1.0:
            raise ValueError(
                f"Compatibility score for {rule.species_a}/{rule.species_b} "
                f"must be within [0, 1], got {rule.score}"
            )
        lookup[pair_key(rule.species_a, rule.species_b)] = float(rule.score)
    return MappingProxyType(lookup)


def get_compatibility_score(lookup: CompatibilityLookup, species_a: str, species_b: str) -> float:
    """
    Compatibility score for a species pair.

    Same species always scores 1.0; unlisted pairs score the neutral default.
    """
    if species_a == species_b:
        return 1.0
    return lookup.get(pair_key(species_a, species_b), DEFAULT_COMPATIBILITY_SCORE)


def hostility(score: float, threshold: float) -> float:
    """Map a compatibility score to hostility in [0, 1] (0 at or above threshold)"""
    return max(0.0, min(1.0, (threshold - score) / threshold))
