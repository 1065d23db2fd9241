"""CLI entrypoint for administering and scoring card sorting sessions."""

from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path

from .config import SWITCH_POLICIES, EngineConfig
from .domain_loader import DEFAULT_DOMAIN_ID, get_domain
from .errors import CardSortError
from .export import read_csv_file, write_csv
from .frame import phase_rt_means, records_to_frame
from .models import SessionSummary
from .respondents import RESPONDENTS
from .session import WCSTSession
from .summary import compute_summary

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
TimerFn = Callable[[], float]
QUIT_COMMANDS = {"q", ":q", ":quit", ":exit"}

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cardsort", description="Computerized card sorting test")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    commands = parser.add_subparsers(dest="command")

    session_options = argparse.ArgumentParser(add_help=False)
    session_options.add_argument("--participant", default="", help="Participant id")
    session_options.add_argument("--session-id", default=None, help="Session id (default: random UUID)")
    session_options.add_argument("--seed", default=None, help="Deck seed (default: generated)")
    session_options.add_argument("--threshold", type=int, default=10, help="Consecutive correct per category")
    session_options.add_argument("--max-trials", type=int, default=128)
    session_options.add_argument("--max-categories", type=int, default=6)
    session_options.add_argument("--policy", choices=SWITCH_POLICIES, default="cyclic", help="Rule switch policy")
    session_options.add_argument("--domain", default=DEFAULT_DOMAIN_ID, help="Bundled stimulus domain id")
    session_options.add_argument("--output", default=None, help="Write the trial log CSV to this path")

    commands.add_parser("play", parents=[session_options], help="Administer a session in the terminal")
    simulate = commands.add_parser("simulate", parents=[session_options], help="Run a scripted respondent")
    simulate.add_argument("--strategy", choices=sorted(RESPONDENTS), default="ideal")

    summary = commands.add_parser("summary", help="Score an exported trial log")
    summary.add_argument("path", help="CSV file written by play/simulate")
    summary.add_argument("--phases", action="store_true", help="Also show response time by learning phase")
    return parser


def run(argv: list[str] | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the CLI application."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    command = args.command or "play"

    try:
        logging.basicConfig(level=str(args.log_level).upper(), format="%(levelname)s %(name)s: %(message)s")
        if command == "summary":
            return summary_command(Path(args.path), print_fn, phases=args.phases)
        session = _session_from_args(args)
        if command == "simulate":
            code = simulate_session(session, args.strategy, print_fn)
        else:
            code = play_shell(session, input_fn, print_fn)
        if args.output:
            target = write_csv(session.records, args.output)
            print_fn(f"Wrote {len(session.records)} trials to {target}")
        return code
    except (CardSortError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", command, exc_info=True)
        print_fn(f"Error: {exc}")
        return 2


def _session_from_args(args: argparse.Namespace) -> WCSTSession:
    """Create a session from parsed CLI options."""
    config = EngineConfig(
        threshold=args.threshold,
        max_trials=args.max_trials,
        max_categories=args.max_categories,
        switch_policy=args.policy,
    )
    return WCSTSession(
        args.participant,
        session_id=args.session_id,
        seed=args.seed,
        config=config,
        domain=get_domain(args.domain),
        device_info="cli",
    )


def play_shell(
    session: WCSTSession,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    timer: TimerFn = time.perf_counter,
) -> int:
    """Administer trials until the session ends or the subject quits."""
    print_fn("\n=== Card Sorting ===")
    print_fn("Match each card to one of the reference cards. You will be told if you are right.")
    print_fn("Type q to stop.")
    for idx, card in enumerate(session.reference_cards, start=1):
        print_fn(f"{idx}) {card.label()}")

    choices = len(session.reference_cards)
    while not session.is_finished:
        stimulus = session.current_stimulus()
        print_fn(f"\nCard {len(session.records) + 1}: {stimulus.label()}")
        started = timer()
        while True:
            choice = input_fn(f"Match to (1-{choices}): ").strip().lower()
            if choice in QUIT_COMMANDS or (choice.isascii() and choice.isdigit() and 1 <= int(choice) <= choices):
                break
            print_fn("Invalid choice.")
        if choice in QUIT_COMMANDS:
            session.abandon()
            print_fn("Session stopped.")
            break
        elapsed_ms = max(0.0, (timer() - started) * 1000.0)
        record = session.submit_response(int(choice) - 1, round(elapsed_ms, 1))
        print_fn("Correct." if record.correct else "Incorrect.")

    print_fn(f"\nSession {session.session_id} ended ({session.termination_reason}). Seed: {session.seed}")
    print_summary(session.summary(), print_fn)
    return 0


def simulate_session(session: WCSTSession, strategy: str, print_fn: PrintFn = print) -> int:
    """Drive a session with a scripted respondent and print the summary."""
    respondent = RESPONDENTS[strategy](session.seed)
    while not session.is_finished:
        stimulus = session.current_stimulus()
        choice = respondent.choose(session.domain, stimulus)
        record = session.submit_response(choice, respondent.response_time_ms())
        respondent.feedback(record.correct)

    print_fn(f"Simulated '{strategy}' respondent, seed {session.seed} ({session.termination_reason})")
    print_summary(session.summary(), print_fn)
    return 0


def summary_command(path: Path, print_fn: PrintFn = print, *, phases: bool = False) -> int:
    """Score an exported trial log."""
    records = read_csv_file(path)
    print_fn(f"Trial log: {path} ({len(records)} trials)")
    print_summary(compute_summary(records), print_fn)
    if phases:
        means = phase_rt_means(records_to_frame(records))
        print_fn("\nCorrect-trial RT by phase:")
        if not means:
            print_fn("No correct trials.")
        for phase, value in means.items():
            print_fn(f"- {phase}: {value:.1f} ms")
    return 0


def print_summary(summary: SessionSummary, print_fn: PrintFn = print) -> None:
    """Print summary fields as an aligned two-column table."""
    rows: list[tuple[str, str]] = []
    for name, value in asdict(summary).items():
        if isinstance(value, float):
            text = f"{value:.3f}"
        elif isinstance(value, tuple):
            text = ", ".join(str(item) for item in value) if value else "-"
        else:
            text = str(value)
        rows.append((name, text))

    name_width = max(len("Measure"), max(len(row[0]) for row in rows))
    header = f"{'Measure':<{name_width}} Value"
    print_fn("\n=== Summary ===")
    print_fn(header)
    print_fn("-" * len(header))
    for name, text in rows:
        print_fn(f"{name:<{name_width}} {text}")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
