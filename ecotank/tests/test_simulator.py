"""
Tests for the ecosystem step function.

Verifies:
- Determinism (identical inputs -> identical outputs)
- Invariant ranges for fish and tank after many steps
- Zero-dt idempotence and negative-dt no-op
- Unknown species are frozen, not dropped
- Harmony drop for hostile stocking vs compatible stocking
- Crowding pressure through step()
- Inputs are never mutated
"""

from dataclasses import replace

import pytest

from ecotank.data_types import (
    CompatibilityRule, EcosystemState, FishBehavior, SpeciesProfile, TankConfig,
    DEFAULT_TANK_CONFIG, PopulationGroup
)
from ecotank.species import DEFAULT_SPECIES_CATALOG, create_species_index
from ecotank.compatibility import DEFAULT_COMPATIBILITY_RULES, build_compatibility_lookup
from ecotank.default_state import create_default_ecosystem_state
from ecotank.simulator import EcosystemStepInput, step, step_ecosystem, find_orphan_fish
from ecotank.numeric import approach


FISH_UNIT_FIELDS = ('energy', 'stress', 'health', 'hunger')
TANK_UNIT_FIELDS = ('water_quality', 'oxygen_level', 'crowding',
                    'aggression_pressure', 'harmony', 'incompatibility')


def default_inputs():
    index = create_species_index(DEFAULT_SPECIES_CATALOG)
    lookup = build_compatibility_lookup(DEFAULT_COMPATIBILITY_RULES)
    return index, lookup, DEFAULT_TANK_CONFIG


def make_species(species_id: str) -> SpeciesProfile:
    return SpeciesProfile(
        species_id=species_id,
        label=species_id.title(),
        size_class="small",
        schooling=1,
        temperament=1,
        territory_need=0.3,
        activity=0.6,
        preferred_depth="mid",
        bioload=0.6,
        oxygen_use=0.5,
    )


def pair_tank(score: float, count_a: int = 6, count_b: int = 6, seed: int = 777):
    """Two-species tank with a single compatibility rule between them"""
    index = create_species_index([make_species("alpha"), make_species("beta")])
    lookup = build_compatibility_lookup([CompatibilityRule("alpha", "beta", score)])
    state = create_default_ecosystem_state(
        seed=seed,
        population=[PopulationGroup("alpha", count_a), PopulationGroup("beta", count_b)],
        species_index=index,
    )
    return state, index, lookup


def assert_in_ranges(state: EcosystemState):
    for fish in state.fish:
        for name in FISH_UNIT_FIELDS:
            value = getattr(fish, name)
            assert 0.0 <= value <= 1.0, f"{fish.fish_id}.{name} out of range: {value}"
        assert fish.decision_timer_sec >= 0.0
        assert fish.behavior in FishBehavior
    for name in TANK_UNIT_FIELDS:
        value = getattr(state.tank, name)
        assert 0.0 <= value <= 1.0, f"tank.{name} out of range: {value}"
    assert state.tank.bioload >= 0.0


def test_approach_never_overshoots():
    assert approach(0.2, 0.5, 0.1) == pytest.approx(0.3)
    assert approach(0.2, 0.5, 10.0) == 0.5
    assert approach(0.8, 0.5, 0.1) == pytest.approx(0.7)
    assert approach(0.8, 0.5, 10.0) == 0.5
    assert approach(0.5, 0.5, 1.0) == 0.5


def test_determinism():
    """Same state and inputs produce identical output (bit-for-bit)"""
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state(82064021)

    a = step(state, index, lookup, config, 1.0 / 60.0)
    b = step(state, index, lookup, config, 1.0 / 60.0)
    assert a == b

    for _ in range(200):
        a = step(a, index, lookup, config, 0.25)
        b = step(b, index, lookup, config, 0.25)
    assert a == b
    assert a.to_dict() == b.to_dict()
    print(f"[OK] 200 ticks identical, rng_state={a.rng_state}")


def test_step_ecosystem_matches_step():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state(5)
    bundled = step_ecosystem(EcosystemStepInput(state, index, lookup, config, 0.5))
    assert bundled == step(state, index, lookup, config, 0.5)


def test_invariant_ranges_over_long_run():
    """Ranges hold for normal, large and tiny dt, including a hostile overstocked tank"""
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state(82064021)
    for dt in [0.016] * 100 + [1.0] * 100 + [30.0] * 20 + [0.0] * 5:
        state = step(state, index, lookup, config, dt)
        assert_in_ranges(state)

    hostile, h_index, h_lookup = pair_tank(0.0, 20, 20)
    small_tank = TankConfig(base_capacity=4.0, oxygen_capacity=3.0, target_population=6)
    for dt in [0.5] * 200 + [120.0] * 10:
        hostile = step(hostile, h_index, h_lookup, small_tank, dt)
        assert_in_ranges(hostile)

    print(f"[OK] hostile tank after stress: harmony={hostile.tank.harmony:.3f} "
          f"water={hostile.tank.water_quality:.3f}")


def test_tick_counts_only_positive_dt():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state()
    state = step(state, index, lookup, config, 0.1)
    assert state.tick == 1
    state = step(state, index, lookup, config, 0.0)
    assert state.tick == 1
    state = step(state, index, lookup, config, 2.0)
    assert state.tick == 2


def test_zero_dt_idempotence():
    """dt=0 leaves physiology, age and tick unchanged but re-rolls behavior"""
    index, lookup, config = default_inputs()
    state = step(create_default_ecosystem_state(), index, lookup, config, 0.3)

    after = step(state, index, lookup, config, 0.0)

    assert after.tick == state.tick
    assert after.tank.timestamp_ms == state.tank.timestamp_ms
    for before_fish, after_fish in zip(state.fish, after.fish):
        for name in FISH_UNIT_FIELDS + ('age_days',):
            assert getattr(after_fish, name) == getattr(before_fish, name), \
                f"{before_fish.fish_id}.{name} changed at dt=0"

    # Every fish re-rolls: two draws each
    assert after.rng_state != state.rng_state


def test_negative_dt_is_noop():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state()
    assert step(state, index, lookup, config, -1.0) is state


def test_unknown_species_frozen_not_dropped():
    """Fish with an unknown species pass through unchanged"""
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state()
    orphan = replace(state.fish[0], fish_id="fish-99", species_id="ghost_shrimp")
    state = replace(state, fish=state.fish + (orphan,))

    assert find_orphan_fish(state, index) == ["fish-99"]

    after = step(state, index, lookup, config, 1.0)

    assert len(after.fish) == len(state.fish)
    assert after.fish[-1] is orphan
    assert after.fish[0] != state.fish[0]
    assert after.tick == state.tick + 1
    print("[OK] Orphan fish frozen, population intact")


def test_inputs_not_mutated():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state(42)
    snapshot = state.to_dict()

    step(state, index, lookup, config, 1.0)

    assert state.to_dict() == snapshot
    assert len(index) == 5


def test_timer_counts_down_without_reroll():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state()
    # Push every timer well beyond the step so nothing re-rolls
    fish = tuple(replace(f, decision_timer_sec=10.0) for f in state.fish)
    state = replace(state, fish=fish)

    after = step(state, index, lookup, config, 1.0)

    assert after.rng_state == state.rng_state
    for f in after.fish:
        assert f.decision_timer_sec == pytest.approx(9.0)
        assert f.behavior == FishBehavior.CRUISE


def test_rest_recovers_energy_and_hunger_grows():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state()
    fish = tuple(
        replace(f, behavior=FishBehavior.REST, decision_timer_sec=100.0, energy=0.3)
        for f in state.fish
    )
    state = replace(state, fish=fish)

    after = step(state, index, lookup, config, 1.0)

    for before_fish, after_fish in zip(state.fish, after.fish):
        assert after_fish.energy > before_fish.energy
        assert after_fish.hunger > before_fish.hunger
        assert after_fish.age_days == pytest.approx(before_fish.age_days + 1.0 / 86400.0)


def test_timestamp_follows_simulated_clock():
    index, lookup, config = default_inputs()
    state = create_default_ecosystem_state(timestamp_ms=1000.0)
    after = step(state, index, lookup, config, 0.5)
    assert after.tank.timestamp_ms == pytest.approx(1500.0)


class TestScenarios:
    """End-to-end tank scenarios."""

    def test_harmony_drop_for_hostile_pair(self):
        """Hostile pair (0.34) vs compatible pair (0.9) at 6 + 6"""
        hostile, h_index, h_lookup = pair_tank(0.34)
        friendly, f_index, f_lookup = pair_tank(0.9)

        hostile = step(hostile, h_index, h_lookup, DEFAULT_TANK_CONFIG, 1.0)
        friendly = step(friendly, f_index, f_lookup, DEFAULT_TANK_CONFIG, 1.0)

        print(f"  hostile:  incompat={hostile.tank.incompatibility:.3f} "
              f"aggression={hostile.tank.aggression_pressure:.3f} harmony={hostile.tank.harmony:.3f}")
        print(f"  friendly: incompat={friendly.tank.incompatibility:.3f} "
              f"aggression={friendly.tank.aggression_pressure:.3f} harmony={friendly.tank.harmony:.3f}")

        assert hostile.tank.incompatibility > friendly.tank.incompatibility
        assert hostile.tank.aggression_pressure > friendly.tank.aggression_pressure
        assert hostile.tank.harmony < friendly.tank.harmony

    def test_crowding_pressure_through_step(self):
        index = create_species_index([replace(make_species("ember_tetra"), bioload=0.3)])
        lookup = build_compatibility_lookup([])
        config = TankConfig(target_population=16)

        crowded = create_default_ecosystem_state(
            population=[PopulationGroup("ember_tetra", 24)], species_index=index)
        sparse = create_default_ecosystem_state(
            population=[PopulationGroup("ember_tetra", 8)], species_index=index)

        crowded = step(crowded, index, lookup, config, 1.0)
        sparse = step(sparse, index, lookup, config, 1.0)

        assert crowded.tank.crowding > 0
        assert crowded.tank.water_quality < sparse.tank.water_quality

    def test_degradation_faster_than_recovery(self):
        """Water quality falls at 0.30/s but recovers at only 0.12/s"""
        index, lookup, _ = default_inputs()
        tight = TankConfig(base_capacity=2.0, target_population=4)
        state = create_default_ecosystem_state()

        degraded = step(state, index, lookup, tight, 0.1)
        drop = state.tank.water_quality - degraded.tank.water_quality

        polluted = replace(state, tank=replace(state.tank, water_quality=0.2))
        recovered = step(polluted, index, lookup, DEFAULT_TANK_CONFIG, 0.1)
        rise = recovered.tank.water_quality - 0.2

        assert drop == pytest.approx(0.03)
        assert rise == pytest.approx(0.012)
