"""
KEYDUNGEON - Main Entry Point
=============================
Generate -> Solve -> (Preview / Export)

Generates a lock-and-key dungeon on a rectangular grid, checks it can be
completed, and optionally prints an ASCII preview or exports it as JSON.

Usage:
    # Generate a 6x6 dungeon with 20 rooms and 3 keys
    python main.py --seed 42 --width 6 --height 6 --rooms 20 --keys 3

    # Add a switch puzzle and show the map
    python main.py --seed 7 --switches 1 --ascii

    # Export the dungeon
    python main.py --seed 7 --export dungeon.json
"""

import argparse
import json
import logging
import sys

from keydungeon.constraints import GridConstraints
from keydungeon.generation import (
    DungeonGenerator,
    GenerationFailureError,
    GeneratorConfig,
    KeyPlacement,
)
from keydungeon.simulation import DungeonSolver
from keydungeon.utils.graph_utils import validate_dungeon
from keydungeon.visualization import render_ascii

logger = logging.getLogger(__name__)

KEY_PLACEMENTS = {
    'intensity': KeyPlacement.INTENSITY,
    'dead-end': KeyPlacement.DEAD_END,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='KeyDungeon - Generate lock-and-key puzzle dungeons'
    )

    parser.add_argument(
        '--seed', '-s', type=int,
        help='Random seed (default: drawn and logged)'
    )
    parser.add_argument(
        '--width', type=int, default=6,
        help='Grid width in rooms (default: 6)'
    )
    parser.add_argument(
        '--height', type=int, default=6,
        help='Grid height in rooms (default: 6)'
    )
    parser.add_argument(
        '--rooms', '-r', type=int, default=20,
        help='Target room count (default: 20)'
    )
    parser.add_argument(
        '--keys', '-k', type=int, default=3,
        help='Number of keys (default: 3)'
    )
    parser.add_argument(
        '--switches', type=int, default=0,
        help='Number of switches (default: 0)'
    )
    parser.add_argument(
        '--retries', type=int, default=20,
        help='Generation retries before giving up (default: 20)'
    )
    parser.add_argument(
        '--no-boss-lock', action='store_true',
        help='Do not reserve a key for the boss door'
    )
    parser.add_argument(
        '--no-goal', action='store_true',
        help='Do not place a goal room behind the boss'
    )
    parser.add_argument(
        '--key-placement', choices=sorted(KEY_PLACEMENTS), default='intensity',
        help='Room ordering for key placement (default: intensity)'
    )
    parser.add_argument(
        '--ascii', action='store_true',
        help='Print ASCII visualization of the dungeon'
    )
    parser.add_argument(
        '--export', '-e', type=str,
        help='Export the dungeon to a JSON file'
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--quiet', '-q', action='store_true',
        help='Only log warnings and errors'
    )
    verbosity.add_argument(
        '--verbose', '-v', action='store_true',
        help='Log per-phase detail'
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.INFO
    if args.quiet:
        level = logging.WARNING
    elif args.verbose:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        constraints = GridConstraints.rectangle(
            args.width, args.height,
            max_rooms=args.rooms,
            max_keys=args.keys,
            max_switches=args.switches,
        )
        config = GeneratorConfig(
            seed=args.seed,
            boss_room_locked=not args.no_boss_lock,
            generate_goal=not args.no_goal,
            max_retries=args.retries,
            key_placement=KEY_PLACEMENTS[args.key_placement],
        )
    except ValueError as e:
        parser.error(str(e))

    generator = DungeonGenerator(constraints, config)
    try:
        dungeon = generator.generate()
    except GenerationFailureError as e:
        logger.error(f"Generation failed: {e}")
        print(f"\n  ✗ GENERATION FAILED after {e.attempts} attempt(s): {e.reason}")
        return 1

    result = DungeonSolver(dungeon).solve()
    valid, errors = validate_dungeon(dungeon, max_keys=args.keys, generate_goal=not args.no_goal)
    for error in errors:
        logger.warning(f"Invariant violated: {error}")

    boss = dungeon.find_boss()
    goal = dungeon.find_goal()
    keys = sorted(room.item.value for room in dungeon.rooms() if room.item is not None and room.item.is_key)

    # User-facing output - keep print() for CLI summary
    print(f"\n{'='*60}")
    print(f"DUNGEON (seed {generator.seed})")
    print(f"{'='*60}")
    print(f"  ✓ Rooms: {dungeon.room_count()}")
    print(f"  ✓ Edges: {dungeon.edge_count()}")
    print(f"  ✓ Keys: {keys}")
    print(f"  ✓ Boss: {boss.id if boss is not None else 'none'}")
    print(f"  ✓ Goal: {goal.id if goal is not None else 'none'}")
    print(f"  ✓ Attempts: {generator.report.attempts}")
    if result.solvable:
        print(f"  ✓ SOLVABLE in {len(result.path) - 1} moves, {result.switch_toggles} switch toggle(s)")
    else:
        print(f"  ✗ NOT SOLVABLE")
    if not valid:
        print(f"  ✗ {len(errors)} invariant violation(s)")

    if args.ascii:
        print("\n" + "="*60)
        print("ASCII VISUALIZATION")
        print("="*60)
        print(render_ascii(dungeon))

    if args.export:
        with open(args.export, 'w', encoding='utf-8') as f:
            json.dump(dungeon.to_dict(), f, indent=2)
        logger.info(f"Exported dungeon to: {args.export}")
        print(f"Exported to: {args.export}")  # User-facing output

    return 0


if __name__ == "__main__":
    sys.exit(main())
