"""CLI entry point for the Iterated Prisoner's Dilemma Playground."""

import argparse
import logging
from pathlib import Path

from .algorithms import InvalidGenomeError, all_genome_names, get_strategy_by_name
from .engine import run_match
from .elimination import run_elimination, STOP_SIZE
from .population import unique26, redundant32
from .signature import all_signatures, compute_signature, decode_signature
from .stats import (
    Stats,
    print_signature_table,
    print_standings,
    print_normal_result_table,
    print_history_table,
)
from .tournament import ROUNDS_PER_MATCH, WEIGHT_STEP
from .export import export_json, export_csv


def list_strategies():
    """Print all genome names with their signatures."""
    print("\nAvailable Genomes:")
    print("-" * 40)
    for i, name in enumerate(all_genome_names(), 1):
        print(f"  {i:>2d}. {name}  <{compute_signature(get_strategy_by_name(name))}>")
    print()


def cmd_signatures(args):
    """Print the signature and decode table for every genome."""
    print_signature_table(all_signatures(), decode_signature)


def cmd_match(args):
    """Play a single match between two genomes."""
    a = get_strategy_by_name(args.a)
    b = get_strategy_by_name(args.b)
    result = run_match(a, b, rounds=args.rounds)
    stats = Stats.from_games(result.games)

    print("=" * 60)
    print(f"  {result.player_name}  vs  {result.opponent_name}")
    print(f"  Rounds: {result.rounds}")
    print("=" * 60)
    print(f"  {result.player_name}: {result.player_moves}")
    print(f"  {result.opponent_name}: {result.opponent_moves}")
    print()
    print(f"  Score: {result.player_score} - {result.opponent_score}")
    print(f"  {stats.summary}")
    print("=" * 60)


def cmd_eliminate(args):
    """Run the elimination loop and print every round."""
    tournament = redundant32() if args.redundant else unique26()

    def on_round(rnd):
        print_standings(rnd.standings, population=rnd.population)
        print_normal_result_table(rnd.weight_winners)

    result = run_elimination(
        tournament,
        stop_size=args.stop_size,
        rounds=args.rounds,
        weight_step=args.step,
        parallel=args.parallel,
        on_round=on_round,
    )
    print_history_table(result.rank_history)
    print_history_table(result.average_history)

    if args.export and args.output:
        _export(args, result)


def _export(args, result):
    """Handle export based on CLI args."""
    fmt = args.export.lower()
    if fmt == "json":
        export_json(result, args.output)
    elif fmt == "csv":
        out = Path(args.output)
        export_csv(result.rank_history, str(out.with_name(f"{out.stem}_rank{out.suffix or '.csv'}")))
        export_csv(result.average_history, str(out.with_name(f"{out.stem}_average{out.suffix or '.csv'}")))
    else:
        print(f"  ✗ Unknown export format: {fmt}. Use 'json' or 'csv'.")


def _genome(value: str) -> str:
    try:
        get_strategy_by_name(value)
    except InvalidGenomeError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def main():
    parser = argparse.ArgumentParser(
        prog="ipd_playground",
        description="Iterated Prisoner's Dilemma playground for memory-1 strategies",
    )
    parser.add_argument("--list", action="store_true", help="List all genomes with signatures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("signatures", help="Print the signature table for all 32 genomes")

    mt = subparsers.add_parser("match", help="Play genome A against genome B")
    mt.add_argument("--a", required=True, type=_genome, help="Genome of player A, e.g. 01011")
    mt.add_argument("--b", required=True, type=_genome, help="Genome of player B")
    mt.add_argument("--rounds", type=int, default=10, help="Number of rounds (default: 10)")

    el = subparsers.add_parser("eliminate", help="Rank, sweep and trim until few strategies remain")
    el.add_argument("--redundant", action="store_true", help="Start from all 32 genomes instead of 26 unique")
    el.add_argument("--rounds", type=int, default=ROUNDS_PER_MATCH,
                    help=f"Rounds per pairing (default: {ROUNDS_PER_MATCH})")
    el.add_argument("--stop-size", type=int, default=STOP_SIZE,
                    help=f"Stop once the population is this small (default: {STOP_SIZE})")
    el.add_argument("--step", type=float, default=WEIGHT_STEP,
                    help=f"Weight grid step (default: {WEIGHT_STEP})")
    el.add_argument("--parallel", action="store_true", help="Play pairings across CPU cores")
    el.add_argument("--export", choices=["json", "csv"], help="Export format")
    el.add_argument("--output", help="Export file path")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        list_strategies()
        return

    if args.command == "signatures":
        cmd_signatures(args)
    elif args.command == "match":
        cmd_match(args)
    elif args.command == "eliminate":
        cmd_eliminate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
