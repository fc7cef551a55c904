"""
Command line front end for the hint engine.

    starbattle-hints hint "<SBN or web task>"
    starbattle-hints solve "<puzzle>" --oracle
    starbattle-hints validate "<puzzle>"
    starbattle-hints count "<puzzle>" --timeout 5000
    starbattle-hints batch puzzles.txt --workers 8
"""
import argparse
import logging
import multiprocessing
import os
import sys
import time
from collections import Counter
from pathlib import Path

from tqdm import tqdm

from starbattle_hints.config import EngineConfig
from starbattle_hints.constants import (
    BASE64_DISPLAY_ALPHABET, UNIFIED_COLORS_BG_TERMINAL, DEFAULT_ORACLE_TIMEOUT_MS, STATE_STAR, STATE_CROSS
)
from starbattle_hints.diagnostics import Diagnostics
from starbattle_hints.errors import StarBattleError, DeductionContradiction
from starbattle_hints.patterns import PatternLibrary
from starbattle_hints.puzzle_handler import board_from_string, board_to_sbn
from starbattle_hints.runner import find_next_hint, solve_step_by_step
from starbattle_hints.validation import validate_state
from starbattle_hints.z3_solver import Z3SolutionCounter, format_duration

RESET = "\033[0m"


def display_terminal_grid(board, title, highlight=()):
    """Prints the board with coloured regions; highlighted cells are bracketed."""
    print(f"\n--- {title} ---")
    region_index = {rid: i for i, rid in enumerate(board.region_ids)}
    highlight = set(highlight)
    for r in range(board.size):
        colored_chars = []
        for c in range(board.size):
            index = region_index[board.region_of((r, c))]
            color_ansi = UNIFIED_COLORS_BG_TERMINAL[index % len(UNIFIED_COLORS_BG_TERMINAL)][1]
            symbol = BASE64_DISPLAY_ALPHABET[index % len(BASE64_DISPLAY_ALPHABET)]
            if board.state((r, c)) == STATE_STAR:
                symbol = '*'
            elif board.state((r, c)) == STATE_CROSS:
                symbol = 'X'
            cell = f"[{symbol}]" if (r, c) in highlight else f" {symbol} "
            colored_chars.append(f"{color_ansi}{cell}{RESET}")
        print("".join(colored_chars))
    print("-----------------\n")


def build_config(args):
    oracle = Z3SolutionCounter() if getattr(args, 'oracle', False) else None
    patterns = PatternLibrary.load(args.patterns) if getattr(args, 'patterns', None) else None
    diagnostics = Diagnostics(trace_techniques=args.verbose >= 2, trace_deductions=args.verbose >= 3)
    return EngineConfig(oracle=oracle, pattern_library=patterns, diagnostics=diagnostics,
                        oracle_timeout_ms=args.timeout)


# --- Commands ---
def do_hint(args):
    board = board_from_string(args.puzzle)
    hint = find_next_hint(board, build_config(args))
    display_terminal_grid(board, "Current Board")
    if hint is None:
        print("No certain move can be found.")
        return 0
    print(f"Technique : {hint.technique}")
    print(f"Move      : {hint.kind} at {', '.join(f'R{r+1}C{c+1}' for r, c in hint.result_cells)}")
    print(f"Reason    : {hint.explanation}")
    display_terminal_grid(board.apply_hint(hint), "After Hint", highlight=hint.result_cells)
    return 0


def do_solve(args):
    board = board_from_string(args.puzzle)
    start_time = time.monotonic()
    steps, final_board = solve_step_by_step(board, build_config(args), max_steps=args.max_steps)
    duration = time.monotonic() - start_time
    for number, hint in enumerate(steps, 1):
        print(f"{number:>3}. [{hint.technique}] {hint.explanation}")
    display_terminal_grid(final_board, "Final Board")
    usage = Counter(hint.technique for hint in steps)
    print("--- Technique usage ---")
    for technique_id, count in usage.most_common():
        print(f"{technique_id:<28}: {count}")
    print(f"{'Solved':<28}: {final_board.is_solved()}")
    print(f"{'Total time':<28}: {format_duration(duration)}")
    print(f"{'SBN':<28}: {board_to_sbn(final_board)}")
    return 0 if final_board.is_solved() else 2


def do_validate(args):
    board = board_from_string(args.puzzle)
    violations = validate_state(board)
    if not violations:
        print("Board is consistent.")
        return 0
    for violation in violations:
        print(f"  - {violation}")
    return 1


def do_count(args):
    board = board_from_string(args.puzzle)
    start_time = time.monotonic()
    outcome = Z3SolutionCounter().count_solutions(board, max_count=args.max_count, timeout_ms=args.timeout)
    status = "timed out" if outcome.timed_out else "search completed"
    print(f"Solutions found: {outcome.count} ({status}, {format_duration(time.monotonic() - start_time)})")
    return 0 if outcome.count == 1 and not outcome.timed_out else 1


def solve_puzzle_worker(job):
    """Runs one step-by-step solve in a worker process. Returns (puzzle, solved, technique counts, error)."""
    puzzle, use_oracle, timeout_ms = job
    try:
        board = board_from_string(puzzle)
        config = EngineConfig(oracle=Z3SolutionCounter() if use_oracle else None, oracle_timeout_ms=timeout_ms)
        steps, final_board = solve_step_by_step(board, config)
        return puzzle, final_board.is_solved(), Counter(h.technique for h in steps), None
    except StarBattleError as e:
        return puzzle, False, Counter(), f"{type(e).__name__}: {e}"


def do_batch(args):
    lines = Path(args.puzzle_file).read_text(encoding='utf-8').splitlines()
    puzzles = [line.strip() for line in lines if line.strip() and not line.startswith('#')]
    if not puzzles:
        print("No puzzles to process.")
        return 0
    workers = args.workers or os.cpu_count()
    jobs = [(puzzle, args.oracle, args.timeout) for puzzle in puzzles]
    solved, failures, usage = 0, [], Counter()
    with multiprocessing.Pool(processes=workers) as pool:
        results_iterator = pool.imap_unordered(solve_puzzle_worker, jobs)
        for puzzle, is_solved, counts, error in tqdm(results_iterator, total=len(jobs), desc="Solving Puzzles"):
            usage.update(counts)
            if error:
                failures.append((puzzle, error))
            elif is_solved:
                solved += 1
    print("\n" + "=" * 40)
    print(f"Solved {solved} of {len(puzzles)} puzzles by logic alone.")
    for technique_id, count in usage.most_common():
        print(f"{technique_id:<28}: {count}")
    for puzzle, error in failures:
        print(f"FAILED {puzzle}: {error}")
    return 1 if failures else 0


def build_parser():
    parser = argparse.ArgumentParser(description="Explains the next certain move in a Star Battle puzzle.")
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="-v logs hints, -vv traces techniques, -vvv dumps deductions.")
    subparsers = parser.add_subparsers(dest='command', required=True, help='Available commands')

    def engine_options(p):
        p.add_argument('--oracle', action='store_true', help="Enable the z3-backed uniqueness techniques.")
        p.add_argument('--patterns', type=Path, help="Directory of JSON pattern files.")
        p.add_argument('--timeout', type=int, default=DEFAULT_ORACLE_TIMEOUT_MS, help="Oracle timeout in ms.")

    p_hint = subparsers.add_parser('hint', help='Show the next certain move.')
    p_hint.add_argument('puzzle', help='SBN or web task string.')
    engine_options(p_hint)
    p_hint.set_defaults(func=do_hint)

    p_solve = subparsers.add_parser('solve', help='Apply hints until the puzzle is solved or stuck.')
    p_solve.add_argument('puzzle', help='SBN or web task string.')
    p_solve.add_argument('--max-steps', type=int, default=1000)
    engine_options(p_solve)
    p_solve.set_defaults(func=do_solve)

    p_validate = subparsers.add_parser('validate', help='List rule violations on a board.')
    p_validate.add_argument('puzzle', help='SBN or web task string.')
    p_validate.set_defaults(func=do_validate)

    p_count = subparsers.add_parser('count', help='Count solutions with z3.')
    p_count.add_argument('puzzle', help='SBN or web task string.')
    p_count.add_argument('--max-count', type=int, default=2)
    p_count.add_argument('--timeout', type=int, default=None, help="Timeout in ms.")
    p_count.set_defaults(func=do_count)

    p_batch = subparsers.add_parser('batch', help='Solve every puzzle in a file, one per line.')
    p_batch.add_argument('puzzle_file', type=Path)
    p_batch.add_argument('--workers', type=int, default=None, help="Worker processes (default: all cores).")
    p_batch.add_argument('--oracle', action='store_true')
    p_batch.add_argument('--timeout', type=int, default=DEFAULT_ORACLE_TIMEOUT_MS)
    p_batch.set_defaults(func=do_batch)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    level = logging.WARNING if args.verbose == 0 else logging.INFO if args.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')
    try:
        return args.func(args)
    except DeductionContradiction as e:
        print(f"Contradiction: {e}")
        return 1
    except StarBattleError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
