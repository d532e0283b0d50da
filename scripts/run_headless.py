"""
Headless tank run.

Steps a session at a fixed dt and prints tick timing plus periodic tank and
population summaries. Use --seed-label to derive the seed from a scenario name.
"""

import argparse
from pathlib import Path

from ecotank.session import EcosystemSession
from ecotank.rng import make_seed
from ecotank.constants import DEFAULT_SEED


def main():
    parser = argparse.ArgumentParser(description="Run the tank ecosystem headless")
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED)
    parser.add_argument('--seed-label', type=str, default=None,
                        help="Derive the seed from a label instead of --seed")
    parser.add_argument('--ticks', type=int, default=600)
    parser.add_argument('--dt', type=float, default=1.0 / 30.0)
    parser.add_argument('--data-root', type=Path, default=None)
    parser.add_argument('--summary-every', type=int, default=100)
    args = parser.parse_args()

    seed = make_seed(args.seed_label) if args.seed_label else args.seed
    schema_dir = args.data_root / "schemas" if args.data_root else None

    session = EcosystemSession(seed=seed, data_root=args.data_root, schema_dir=schema_dir)

    print(f"Running {args.ticks} ticks at dt={args.dt:.4f}s...")
    session.run(args.ticks, args.dt, summary_every=args.summary_every)
    session.print_tick_summary()

    stats = session.get_population_stats()
    print(f"[OK] Finished: {stats['fish_count']} fish, "
          f"mean health {stats['mean_health']:.3f}, "
          f"harmony {session.state.tank.harmony:.3f}")


if __name__ == '__main__':
    main()
