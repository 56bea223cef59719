import argparse
import logging
import sys
from pathlib import Path

from .combat import CombatPredictor, DuelRandom, MobProfile, resolve_duel
from .config import load_combat_config
from .errors import MobArenaError
from .logging_config import configure_logging
from .registry import TraitRegistry, WeaponRegistry

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="mob-arena",
        description="Mob Arena - resolve duels between mobs or predict matchups",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to a combat config YAML file overriding balance constants.",
    )
    parser.add_argument("--weapons", type=Path, default=None, help="Weapon catalog YAML replacing the built-in one.")
    parser.add_argument("--traits", type=Path, default=None, help="Trait catalog YAML replacing the built-in one.")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    duel = sub.add_parser("duel", help="Resolve a single duel between two mob profiles.")
    duel.add_argument("first", type=Path, help="YAML profile of side A")
    duel.add_argument("second", type=Path, help="YAML profile of side B")
    duel.add_argument("--seed", default=None, help="Seed for a reproducible duel.")
    duel.add_argument("--events", action="store_true", help="Print every outcome event.")
    duel.add_argument("--strict", action="store_true", help="Reject unknown weapons and traits.")

    predict = sub.add_parser("predict", help="Estimate side A's win rate by repeated simulation.")
    predict.add_argument("first", type=Path, help="YAML profile of side A")
    predict.add_argument("second", type=Path, help="YAML profile of side B")
    predict.add_argument("--trials", type=int, default=None, help="Number of simulated duels.")
    predict.add_argument("--seed", default=None, help="Master seed for reproducible predictions.")

    return parser.parse_args(argv)


def _run_duel(args, registries, config) -> int:
    weapons, traits = registries
    a = MobProfile.from_yaml(args.first)
    b = MobProfile.from_yaml(args.second)
    result = resolve_duel(
        a,
        b,
        weapons=weapons,
        traits=traits,
        config=config,
        rng=None if args.seed is None else DuelRandom.seeded(args.seed),
        strict=args.strict,
    )
    if args.events:
        for event in result.events:
            print(event.message)
    print(f"Winner: {result.winner.name} ({result.winner_hp}/{result.winner.max_hp} HP) after {result.cycles} cycles")
    return 0


def _run_predict(args, registries, config) -> int:
    weapons, traits = registries
    a = MobProfile.from_yaml(args.first)
    b = MobProfile.from_yaml(args.second)
    predictor = CombatPredictor(weapons=weapons, traits=traits, config=config, seed=args.seed)
    report = predictor.simulate(a, b, trials=args.trials)
    print(f"{a.display_name} wins {report.win_rate:.1f}% of {report.trials} duels against {b.display_name}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(default_level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        config = load_combat_config(args.config_path)
        weapons = WeaponRegistry.from_yaml(args.weapons) if args.weapons else WeaponRegistry()
        traits = TraitRegistry.from_yaml(args.traits) if args.traits else TraitRegistry()
        if args.command == "duel":
            return _run_duel(args, (weapons, traits), config)
        return _run_predict(args, (weapons, traits), config)
    except (MobArenaError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
