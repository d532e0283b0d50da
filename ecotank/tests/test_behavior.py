"""
Tests for behavior weighting and selection.

Verifies:
- Roulette selection always returns a valid behavior
- Zero / negative weights fall back to cruise
- Fixed enumeration order drives the outcome
- Schooling deficit and chase eligibility
- Decision timer ranges
"""

import pytest

from ecotank.data_types import FishBehavior, FishState, TankConfig
from ecotank.species import DEFAULT_SPECIES_CATALOG, create_species_index
from ecotank.compatibility import DEFAULT_COMPATIBILITY_RULES, build_compatibility_lookup
from ecotank.metrics import compute_tank_metrics
from ecotank.behavior import (
    BEHAVIOR_ORDER, behavior_weights_for_fish, decision_timer_for,
    schooling_deficit, weighted_behavior_choice
)
from ecotank.rng import next_random


def make_fish(species_id: str, index: int = 0, **overrides) -> FishState:
    fields = dict(
        fish_id=f"fish-{index + 1}",
        species_id=species_id,
        age_days=30.0,
        energy=0.8,
        stress=0.2,
        health=0.9,
        hunger=0.2,
        behavior="cruise",
        decision_timer_sec=0.0,
        motion_seed=index,
        lane_y_norm=0.0,
        lane_z_norm=0.0,
        path_width_norm=0.5,
        path_depth_norm=0.3,
        phase=0.0,
        speed_factor=1.0,
    )
    fields.update(overrides)
    return FishState(**fields)


def test_order_is_fixed_and_complete():
    assert [b.value for b in BEHAVIOR_ORDER] == [
        "cruise", "school", "inspect", "hover", "dart", "rest", "avoid", "chase"
    ]
    assert set(BEHAVIOR_ORDER) == set(FishBehavior)


def test_all_zero_weights_fall_back_to_cruise():
    weights = {b: 0.0 for b in BEHAVIOR_ORDER}
    assert weighted_behavior_choice(0.5, weights) == FishBehavior.CRUISE
    assert weighted_behavior_choice(0.5, {}) == FishBehavior.CRUISE


def test_negative_weights_floor_at_zero():
    weights = {b: -1.0 for b in BEHAVIOR_ORDER}
    assert weighted_behavior_choice(0.3, weights) == FishBehavior.CRUISE

    # Only dart carries weight; negatives elsewhere must not shift the wheel
    weights[FishBehavior.DART] = 2.0
    for r in (0.01, 0.5, 0.99):
        assert weighted_behavior_choice(r, weights) == FishBehavior.DART


def test_tiny_weights_still_select_valid_behavior():
    weights = {b: 1e-300 for b in BEHAVIOR_ORDER}
    seed = 99
    for _ in range(200):
        r, seed = next_random(seed)
        assert weighted_behavior_choice(r, weights) in BEHAVIOR_ORDER


def test_roulette_follows_enumeration_order():
    weights = {b: 1.0 for b in BEHAVIOR_ORDER}
    # Eight equal slices of the wheel
    assert weighted_behavior_choice(0.05, weights) == FishBehavior.CRUISE
    assert weighted_behavior_choice(0.20, weights) == FishBehavior.SCHOOL
    assert weighted_behavior_choice(0.55, weights) == FishBehavior.DART
    assert weighted_behavior_choice(0.95, weights) == FishBehavior.CHASE


def test_selection_is_total_over_random_draws():
    index = create_species_index(DEFAULT_SPECIES_CATALOG)
    lookup = build_compatibility_lookup(DEFAULT_COMPATIBILITY_RULES)
    fish = tuple(make_fish(s.species_id, i) for i, s in enumerate(DEFAULT_SPECIES_CATALOG))
    metrics = compute_tank_metrics(fish, index, lookup, TankConfig())

    seen = set()
    seed = 2024
    for entry in fish:
        weights = behavior_weights_for_fish(entry, index[entry.species_id], metrics, 1)
        for _ in range(400):
            r, seed = next_random(seed)
            choice = weighted_behavior_choice(r, weights)
            assert choice in BEHAVIOR_ORDER
            seen.add(choice)

    print(f"[OK] Behaviors observed: {sorted(b.value for b in seen)}")
    assert FishBehavior.CRUISE in seen


class TestSchoolingDeficit:
    """Schooling penalty for undersized groups."""

    def test_solitary_species_never_penalized(self):
        gourami = create_species_index(DEFAULT_SPECIES_CATALOG)["dwarf_gourami"]
        assert schooling_deficit(gourami, 1) == 0.0

    def test_shortfall_is_proportional(self):
        neon = create_species_index(DEFAULT_SPECIES_CATALOG)["neon_tetra"]
        # schooling 3 -> minimum group of 4
        assert schooling_deficit(neon, 1) == pytest.approx(0.75)
        assert schooling_deficit(neon, 2) == pytest.approx(0.5)
        assert schooling_deficit(neon, 4) == 0.0
        assert schooling_deficit(neon, 9) == 0.0


class TestBehaviorWeights:
    """Weight table for individual fish."""

    def setup_method(self):
        self.index = create_species_index(DEFAULT_SPECIES_CATALOG)
        self.lookup = build_compatibility_lookup(DEFAULT_COMPATIBILITY_RULES)

    def _metrics(self, fish):
        return compute_tank_metrics(fish, self.index, self.lookup, TankConfig())

    def test_school_requires_company(self):
        fish = (make_fish("neon_tetra", 0),)
        metrics = self._metrics(fish)
        alone = behavior_weights_for_fish(fish[0], self.index["neon_tetra"], metrics, 1)
        grouped = behavior_weights_for_fish(fish[0], self.index["neon_tetra"], metrics, 3)
        assert alone[FishBehavior.SCHOOL] == 0.01
        assert grouped[FishBehavior.SCHOOL] == pytest.approx(0.8 + 3 * 0.26)

    def test_chase_requires_temperament(self):
        fish = (make_fish("dwarf_gourami", 0), make_fish("guppy", 1))
        metrics = self._metrics(fish)
        gourami = behavior_weights_for_fish(fish[0], self.index["dwarf_gourami"], metrics, 1)
        guppy = behavior_weights_for_fish(fish[1], self.index["guppy"], metrics, 1)
        assert gourami[FishBehavior.CHASE] > 0.04
        assert guppy[FishBehavior.CHASE] == 0.01

    def test_tired_fish_prefers_rest(self):
        fish = (make_fish("guppy", 0),)
        metrics = self._metrics(fish)
        rested = behavior_weights_for_fish(fish[0], self.index["guppy"], metrics, 1)
        tired_fish = make_fish("guppy", 0, energy=0.05, health=0.4)
        tired = behavior_weights_for_fish(tired_fish, self.index["guppy"], metrics, 1)
        assert tired[FishBehavior.REST] > rested[FishBehavior.REST]
        assert tired[FishBehavior.HOVER] > rested[FishBehavior.HOVER]

    def test_weights_cover_every_behavior(self):
        fish = (make_fish("cherry_barb", 0),)
        weights = behavior_weights_for_fish(fish[0], self.index["cherry_barb"], self._metrics(fish), 1)
        assert list(weights.keys()) == list(BEHAVIOR_ORDER)


def test_decision_timer_ranges():
    assert decision_timer_for(FishBehavior.CRUISE, 0.0) == pytest.approx(0.9)
    assert decision_timer_for(FishBehavior.CRUISE, 0.999) < 3.3
    assert decision_timer_for(FishBehavior.REST, 0.0) == pytest.approx(0.9 + 1.2)
    assert decision_timer_for(FishBehavior.HOVER, 0.5) == pytest.approx(0.9 + 1.2 + 0.5)
