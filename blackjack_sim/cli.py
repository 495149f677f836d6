"""Command-line front end.

Two subcommands:

    blackjack-sim play      — interactive game at the terminal
    blackjack-sim simulate  — parallel batch of automated sessions + report

The terminal prompts own all user-input validation: the engine only ever
receives a bet between 1 and the current credits, and one of the four
player actions.

Run:
    blackjack-sim simulate --sessions 10000 --workers 8
    python -m blackjack_sim.cli play --credits 200
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Callable

from blackjack_sim.analysis.bankroll import compute_credit_stats, print_batch_report
from blackjack_sim.analysis.session import BetPolicy, RoundObserver, run_session
from blackjack_sim.analysis.simulator import simulate_sessions
from blackjack_sim.engine.errors import BlackjackError
from blackjack_sim.engine.game_round import RoundResult
from blackjack_sim.engine.player import ActionSource, Hand, PlayerAction, Strategy
from blackjack_sim.engine.rules import DEFAULT_RULES, HouseRules

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

ACTION_KEYS: dict[str, PlayerAction] = {
    "h": PlayerAction.HIT,
    "hit": PlayerAction.HIT,
    "s": PlayerAction.STAND,
    "stand": PlayerAction.STAND,
    "d": PlayerAction.DOUBLE_DOWN,
    "double": PlayerAction.DOUBLE_DOWN,
    "q": PlayerAction.QUIT,
    "quit": PlayerAction.QUIT,
}

QUIT_KEYS: frozenset[str] = frozenset({"q", "quit"})


# ─── Terminal prompts ─────────────────────────────────────────────────────────


def make_bet_prompt(input_fn: InputFn | None = None, out: OutputFn = print) -> BetPolicy:
    """Return a bet policy that asks at the terminal until the bet is valid.

    Entering 'q' walks away from the table (the policy returns None).
    """

    def _prompt(credits: int) -> int | None:
        read = input_fn or input
        while True:
            raw = read(f"Credits: ${credits}. Bet (1-{credits}, q to quit): ").strip().lower()
            if raw in QUIT_KEYS:
                return None
            try:
                bet = int(raw)
            except ValueError:
                out(f"'{raw}' is not a whole number.")
                continue
            if 1 <= bet <= credits:
                return bet
            out(f"Bet must be between 1 and {credits}.")

    return _prompt


def make_action_prompt(
    dealer: Hand,
    input_fn: InputFn | None = None,
    out: OutputFn = print,
) -> ActionSource:
    """Return an action source that shows both hands and asks for an action.

    Double down is only offered when the hand is eligible; choosing it
    anyway is still handled by the engine (it degrades to a hit).
    """

    def _prompt(hand: Hand, bet: int) -> PlayerAction:
        read = input_fn or input
        out(str(dealer))
        out(str(hand))
        options = ["[h]it", "[s]tand"]
        if hand.can_double_down(bet):
            options.append("[d]ouble down")
        options.append("[q]uit")
        while True:
            raw = read(f"{', '.join(options)}: ").strip().lower()
            action = ACTION_KEYS.get(raw)
            if action is not None:
                return action
            out(f"Unrecognised action '{raw}'.")

    return _prompt


def make_round_printer(out: OutputFn = print) -> RoundObserver:
    def _observer(result: RoundResult, player: Hand) -> None:
        out(str(result))
        out(f"{player.name} credits: {player.credits}")
        out("")

    return _observer


# ─── Subcommands ──────────────────────────────────────────────────────────────


def rules_from_args(args: argparse.Namespace) -> HouseRules:
    """Map command-line flags onto HouseRules.

    Raises:
        ValueError: If the resulting rules are invalid.
    """
    overrides = {
        "starting_credits": args.credits,
        "max_rounds": args.rounds,
    }
    if getattr(args, "bet", None) is not None:
        overrides["base_bet"] = args.bet
    if getattr(args, "no_reshuffle", False):
        overrides["reshuffle_every_round"] = False
    return dataclasses.replace(DEFAULT_RULES, **overrides).validate()


def cmd_play(
    args: argparse.Namespace,
    input_fn: InputFn | None = None,
    out: OutputFn = print,
) -> int:
    """Interactive single-player session against the dealer."""
    rules = rules_from_args(args)
    dealer = Hand("Dealer", Strategy.DEALER, rules=rules)
    player = Hand(args.name, Strategy.INTERACTIVE, rules=rules)

    out(f"Welcome, {player.name}. You have {player.credits} credits.")
    stats = run_session(
        rules,
        seed=args.seed,
        strategy=Strategy.INTERACTIVE,
        bet_policy=make_bet_prompt(input_fn, out),
        choose_action=make_action_prompt(dealer, input_fn, out),
        on_round=make_round_printer(out),
        player=player,
        dealer=dealer,
    )
    out(str(stats))
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    """Batch of automated sessions followed by the summary report."""
    rules = rules_from_args(args)
    batch = simulate_sessions(
        args.sessions,
        rules,
        seed=args.seed,
        workers=args.workers,
        return_credits=True,
    )
    credit_stats = None
    if batch.final_credits is not None and len(batch.final_credits) > 0:
        credit_stats = compute_credit_stats(batch.final_credits, rules.starting_credits)
    print_batch_report(batch, credit_stats)
    return 0


# ─── Parser ───────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blackjack-sim",
        description="Blackjack round simulator: interactive play and batch statistics.",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Play interactively against the dealer.")
    play.add_argument("--name", default="Player")
    play.add_argument("--credits", type=int, default=DEFAULT_RULES.starting_credits)
    play.add_argument("--rounds", type=int, default=DEFAULT_RULES.max_rounds)
    play.add_argument("--seed", type=int, default=None)
    play.set_defaults(func=cmd_play)

    sim = sub.add_parser("simulate", help="Run a batch of automated sessions.")
    sim.add_argument("--sessions", type=int, default=1_000)
    sim.add_argument("--rounds", type=int, default=DEFAULT_RULES.max_rounds)
    sim.add_argument("--credits", type=int, default=DEFAULT_RULES.starting_credits)
    sim.add_argument("--bet", type=int, default=DEFAULT_RULES.base_bet)
    sim.add_argument("--seed", type=int, default=42)
    sim.add_argument("--workers", type=int, default=None, help="Default: CPU count.")
    sim.add_argument(
        "--no-reshuffle",
        action="store_true",
        help="Reuse the deck between rounds until it runs low.",
    )
    sim.set_defaults(func=cmd_simulate)

    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except BlackjackError as exc:
        logger.debug("Game aborted.", exc_info=True)
        print(f"{parser.prog}: fatal game error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        parser.error(str(exc))
    return 2


if __name__ == "__main__":
    sys.exit(main())
