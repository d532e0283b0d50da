"""
Headless session driver.

EcosystemSession owns one EcosystemState and advances it with step(), the
way a render loop would. It adds tick timing, population telemetry and
console summaries on top of the pure simulator.
"""

import numpy as np
import time
from collections import Counter, deque
from pathlib import Path
from typing import Deque, Optional

from .data_types import DEFAULT_TANK_CONFIG, EcosystemState
from .species import DEFAULT_SPECIES_CATALOG, create_species_index
from .compatibility import DEFAULT_COMPATIBILITY_RULES, build_compatibility_lookup
from .default_state import DEFAULT_POPULATION, create_default_ecosystem_state
from .simulator import step, find_orphan_fish
from .loader import load_all_data
from .constants import DEFAULT_SEED, TICK_TIME_WINDOW, ECOSYSTEM_LOG_INTERVAL


class EcosystemSession:
    """
    Single-owner driver for one tank.

    Not thread-safe: exactly one caller advances the session.
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        data_root: Optional[Path] = None,
        schema_dir: Optional[Path] = None,
        state: Optional[EcosystemState] = None,
        verbose: bool = True
    ):
        """
        Initialize a session from a data pack or the built-in defaults.

        Args:
            seed: Root seed for the bootstrap
            data_root: Optional data pack directory (built-in catalog if None)
            schema_dir: Optional path to JSON schemas
            state: Optional pre-built state (skips the bootstrap)
            verbose: Print load/summary lines to the console
        """
        self.verbose = verbose

        if data_root is not None:
            self._log("Loading data pack...")
            data = load_all_data(data_root, schema_dir)
            self.species_index = data['species_index']
            self.compatibility = data['compatibility']
            self.tank_config = data['tank_config']
            population = data['population']
        else:
            self.species_index = create_species_index(DEFAULT_SPECIES_CATALOG)
            self.compatibility = build_compatibility_lookup(DEFAULT_COMPATIBILITY_RULES)
            self.tank_config = DEFAULT_TANK_CONFIG
            population = DEFAULT_POPULATION

        if state is None:
            state = create_default_ecosystem_state(
                seed=seed,
                population=population,
                species_index=self.species_index
            )
        self.state: EcosystemState = state
        self.seed = seed

        # Wall time of the most recent ticks (seconds)
        self._tick_times: Deque[float] = deque(maxlen=TICK_TIME_WINDOW)

        self.orphan_fish = find_orphan_fish(self.state, self.species_index)
        for fish_id in self.orphan_fish:
            self._log(f"[WARN] Fish {fish_id} references an unknown species, it will be frozen")

        self._log(f"[OK] Session initialized: {len(self.state.fish)} fish, "
                  f"{len(self.species_index)} species, seed={seed}")

    def _log(self, message: str):
        if self.verbose:
            print(message)

    @property
    def tick_count(self) -> int:
        return self.state.tick

    def tick(self, dt_sec: float) -> EcosystemState:
        """
        Advance the session by dt_sec seconds.

        Returns:
            The new current state
        """
        started = time.perf_counter()
        self.state = step(
            state=self.state,
            species_index=self.species_index,
            compatibility=self.compatibility,
            tank_config=self.tank_config,
            dt_sec=dt_sec
        )
        self._tick_times.append(time.perf_counter() - started)
        return self.state

    def run(self, ticks: int, dt_sec: float, summary_every: Optional[int] = None) -> EcosystemState:
        """
        Advance the session by a fixed number of ticks.

        Args:
            ticks: Number of steps
            dt_sec: Elapsed time per step
            summary_every: Print an ecosystem summary every N ticks (None = never)
        """
        for _ in range(ticks):
            self.tick(dt_sec)
            if summary_every:
                self.print_ecosystem_summary(every=summary_every)
        return self.state

    def get_tick_stats(self) -> dict:
        """
        Step timing over the last TICK_TIME_WINDOW ticks.

        Returns:
            Dict with tick_count, window, avg/max/last tick time in ms
        """
        stats = {
            'tick_count': self.tick_count,
            'window': len(self._tick_times),
            'avg_tick_time_ms': 0.0,
            'max_tick_time_ms': 0.0,
            'last_tick_time_ms': 0.0,
        }
        if self._tick_times:
            times_ms = np.fromiter(self._tick_times, dtype=np.float64) * 1000.0
            stats['avg_tick_time_ms'] = float(times_ms.mean())
            stats['max_tick_time_ms'] = float(times_ms.max())
            stats['last_tick_time_ms'] = float(times_ms[-1])
        return stats

    def get_population_stats(self) -> dict:
        """
        Aggregate physiology across the population.

        Returns:
            Dict with mean/min of energy, stress, health, hunger, a behavior
            histogram and the number of frozen (orphan) fish
        """
        fish = self.state.fish
        stats = {
            'fish_count': len(fish),
            'orphan_count': len(self.orphan_fish),
            'behaviors': dict(Counter(f.behavior.value for f in fish)),
        }

        for name in ('energy', 'stress', 'health', 'hunger'):
            values = np.array([getattr(f, name) for f in fish], dtype=np.float64)
            if len(values) > 0:
                stats[f'mean_{name}'] = float(np.mean(values))
                stats[f'min_{name}'] = float(np.min(values))
            else:
                stats[f'mean_{name}'] = 0.0
                stats[f'min_{name}'] = 0.0

        return stats

    def get_snapshot(self) -> dict:
        """
        Get complete session snapshot.

        Returns:
            Dict with tick_count, fish_count, state, timing
        """
        return {
            'tick_count': self.tick_count,
            'fish_count': len(self.state.fish),
            'state': self.state.to_dict(),
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """One-line step timing and tank status"""
        stats = self.get_tick_stats()
        tank = self.state.tank
        print(f"Tick {stats['tick_count']:5d} | "
              f"step {stats['avg_tick_time_ms']:.3f} ms avg, "
              f"{stats['max_tick_time_ms']:.3f} ms max over {stats['window']} | "
              f"{len(self.state.fish)} fish, harmony {tank.harmony:.3f}, "
              f"sim time {tank.timestamp_ms / 1000.0:.1f} s")

    def print_ecosystem_summary(self, every: int = ECOSYSTEM_LOG_INTERVAL):
        """Print tank and population health every N ticks"""
        if every <= 0 or self.tick_count == 0 or self.tick_count % every != 0:
            return

        tank = self.state.tank
        pop = self.get_population_stats()
        behaviors = " ".join(f"{k}={v}" for k, v in sorted(pop['behaviors'].items()))

        print(f"  [Ecosystem] tick={self.tick_count} | "
              f"water={tank.water_quality:.3f} oxygen={tank.oxygen_level:.3f} "
              f"crowding={tank.crowding:.3f} harmony={tank.harmony:.3f}")
        print(f"  [Population] energy_mean={pop['mean_energy']:.3f} "
              f"stress_mean={pop['mean_stress']:.3f} "
              f"health_min={pop['min_health']:.3f} | {behaviors}")
