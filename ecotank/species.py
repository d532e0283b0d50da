"""
Built-in species catalog and species index construction.

The index is a read-only mapping shared by every fish; fish reference their
profile by species_id only.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from .data_types import (
    SpeciesProfile, SpeciesRenderProfile, SizeClass, PreferredDepth
)


SpeciesIndex = Mapping[str, SpeciesProfile]


class UnknownSpeciesError(KeyError):
    """Raised when a species_id has no profile in the index"""
    pass


DEFAULT_SPECIES_CATALOG = (
    SpeciesProfile(
        species_id="neon_tetra",
        label="Neon Tetra",
        size_class=SizeClass.SMALL,
        schooling=3,
        temperament=0,
        territory_need=0.12,
        activity=0.78,
        preferred_depth=PreferredDepth.MID,
        bioload=0.72,
        oxygen_use=0.58,
        compatibility_tags=("community", "schooling"),
        render=SpeciesRenderProfile(
            body_rgb=(0.2, 0.87, 1.0),
            fin_rgb=(0.95, 0.38, 0.3),
            eye_rgb=(0.08, 0.12, 0.15),
        ),
    ),
    SpeciesProfile(
        species_id="guppy",
        label="Guppy",
        size_class=SizeClass.SMALL,
        schooling=1,
        temperament=0,
        territory_need=0.18,
        activity=0.74,
        preferred_depth=PreferredDepth.TOP,
        bioload=0.8,
        oxygen_use=0.62,
        compatibility_tags=("community", "livebearer"),
        render=SpeciesRenderProfile(
            body_rgb=(1.0, 0.58, 0.24),
            fin_rgb=(1.0, 0.77, 0.3),
            eye_rgb=(0.1, 0.08, 0.08),
        ),
    ),
    SpeciesProfile(
        species_id="corydoras",
        label="Corydoras",
        size_class=SizeClass.SMALL,
        schooling=2,
        temperament=0,
        territory_need=0.14,
        activity=0.46,
        preferred_depth=PreferredDepth.BOTTOM,
        bioload=0.84,
        oxygen_use=0.6,
        compatibility_tags=("community", "bottom-dweller"),
        render=SpeciesRenderProfile(
            body_rgb=(0.65, 0.74, 0.84),
            fin_rgb=(0.44, 0.56, 0.66),
            eye_rgb=(0.1, 0.1, 0.12),
        ),
    ),
    SpeciesProfile(
        species_id="dwarf_gourami",
        label="Dwarf Gourami",
        size_class=SizeClass.MEDIUM,
        schooling=0,
        temperament=2,
        territory_need=0.56,
        activity=0.56,
        preferred_depth=PreferredDepth.MID,
        bioload=1.34,
        oxygen_use=0.92,
        compatibility_tags=("territorial",),
        render=SpeciesRenderProfile(
            body_rgb=(0.56, 0.74, 1.0),
            fin_rgb=(0.84, 0.92, 1.0),
            eye_rgb=(0.08, 0.1, 0.14),
        ),
    ),
    SpeciesProfile(
        species_id="cherry_barb",
        label="Cherry Barb",
        size_class=SizeClass.SMALL,
        schooling=2,
        temperament=1,
        territory_need=0.24,
        activity=0.7,
        preferred_depth=PreferredDepth.MID,
        bioload=0.86,
        oxygen_use=0.68,
        compatibility_tags=("community", "schooling"),
        render=SpeciesRenderProfile(
            body_rgb=(0.96, 0.3, 0.44),
            fin_rgb=(1.0, 0.58, 0.34),
            eye_rgb=(0.12, 0.08, 0.08),
        ),
    ),
)


def create_species_index(catalog: Iterable[SpeciesProfile]) -> SpeciesIndex:
    """
    Build a read-only species_id -> SpeciesProfile mapping.

    Raises:
        ValueError: If two profiles share a species_id
    """
    index = {}
    for species in catalog:
        if species.species_id in index:
            raise ValueError(f"Duplicate species_id in catalog: {species.species_id}")
        index[species.species_id] = species
    return MappingProxyType(index)


def get_species(index: SpeciesIndex, species_id: str) -> SpeciesProfile:
    """Look up a profile, raising UnknownSpeciesError on a miss"""
    try:
        return index[species_id]
    except KeyError:
        raise UnknownSpeciesError(species_id) from None
