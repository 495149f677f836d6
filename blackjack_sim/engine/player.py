"""
Hand actor and the per-round turn state machine.

A Hand is owned by one actor (dealer or player) for a whole session. Cards
are appended as they are dealt and cleared between rounds; credits persist.

Turn states per round:

    ACTIVE ──hit──> ACTIVE
       │
       └──> terminal: STAND | BUST | BLACKJACK | DOUBLED | QUIT

Hand.play_once() advances exactly one step and reports (done, bet, state).
Before any strategy is consulted every hand auto-terminates on a 21 in
either sum (BLACKJACK) or a low sum over 21 (BUST).

The three behaviours are a tagged variant (Strategy) dispatched through
_TURN_HANDLERS; each handler is a function of (hand, deck, bet, context):

    DEALER       — draw until the dealer stand total is reached
    TABLE        — follow decision_table.decide()
    INTERACTIVE  — ask an external action source; the hand still owns the
                   eligibility checks and the hit/double/stand mechanics
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, NamedTuple

from .cards import MAX_BLACKJACK, Card, Rank, card_to_str
from .deck import Deck
from .decision_table import Action, decide
from .errors import InvariantError
from .hand import HandValue, final_value, hand_value
from .rules import DEFAULT_RULES, HouseRules

logger = logging.getLogger(__name__)

# Eleven cards always reach 21 in the low sum, which ends the turn.
MAX_HAND_CARDS: int = 11


# ─── Enumerations ─────────────────────────────────────────────────────────────

class Strategy(Enum):
    DEALER = auto()
    TABLE = auto()
    INTERACTIVE = auto()


class PlayerAction(Enum):
    HIT = auto()
    STAND = auto()
    DOUBLE_DOWN = auto()
    QUIT = auto()


class TurnState(Enum):
    ACTIVE = auto()
    STAND = auto()
    BUST = auto()
    BLACKJACK = auto()
    DOUBLED = auto()
    QUIT = auto()


class TurnResult(NamedTuple):
    done: bool
    bet: int
    state: TurnState


# choose_action(hand, bet) -> PlayerAction
ActionSource = Callable[["Hand", int], PlayerAction]

_TABLE_TO_PLAYER: dict[Action, PlayerAction] = {
    Action.HIT: PlayerAction.HIT,
    Action.STAND: PlayerAction.STAND,
    Action.DOUBLE_DOWN: PlayerAction.DOUBLE_DOWN,
}


# ─── Credits ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Credits:
    """A credit balance that is either a finite amount or unlimited.

    The dealer's bank is unlimited: arithmetic leaves it unchanged and it
    covers any amount. Use Credits.finite() / Credits.unlimited() to build
    values rather than the constructor.
    """

    amount: int = 0
    is_unlimited: bool = False

    @classmethod
    def finite(cls, amount: int) -> Credits:
        return cls(amount=amount)

    @classmethod
    def unlimited(cls) -> Credits:
        return cls(is_unlimited=True)

    @property
    def balance(self) -> int:
        """The finite balance. Raises InvariantError for an unlimited bank."""
        if self.is_unlimited:
            raise InvariantError("An unlimited bank has no finite balance.")
        return self.amount

    def covers(self, amount: int) -> bool:
        return self.is_unlimited or self.amount >= amount

    def debit(self, amount: int) -> Credits:
        if self.is_unlimited:
            return self
        return Credits.finite(self.amount - amount)

    def credit(self, amount: int) -> Credits:
        if self.is_unlimited:
            return self
        return Credits.finite(self.amount + amount)

    def __str__(self) -> str:
        return "unlimited" if self.is_unlimited else f"${self.amount}"


# ─── Turn context ─────────────────────────────────────────────────────────────

class TurnContext(NamedTuple):
    dealer_up: Rank | None
    choose_action: ActionSource | None


# ─── Hand actor ───────────────────────────────────────────────────────────────

class Hand:
    """A dealer's or player's hand plus the actor's credits.

    Args:
        name:     Display name.
        strategy: Which turn behaviour drives this hand.
        credits:  Starting balance for players. Ignored for the dealer, whose
                  bank is always unlimited. Defaults to rules.starting_credits.
        rules:    House rules (double-down window, dealer stand total).
    """

    def __init__(
        self,
        name: str,
        strategy: Strategy,
        credits: int | None = None,
        rules: HouseRules = DEFAULT_RULES,
    ) -> None:
        self.name = name
        self.strategy = strategy
        self.rules = rules
        self.cards: list[Card] = []
        if strategy is Strategy.DEALER:
            self.credits = Credits.unlimited()
        else:
            self.credits = Credits.finite(
                rules.starting_credits if credits is None else credits
            )
        # The dealer's hole card stays hidden until the dealer plays.
        self.reveal = not self.is_dealer

    @property
    def is_dealer(self) -> bool:
        return self.strategy is Strategy.DEALER

    # ── Card handling ─────────────────────────────────────────────────────────

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def draw(self, deck: Deck) -> Card:
        """Deal one card from the deck into this hand."""
        if len(self.cards) >= MAX_HAND_CARDS:
            raise InvariantError(f"{self.name} already holds {len(self.cards)} cards.")
        card = deck.deal()
        self.cards.append(card)
        return card

    def clear(self) -> None:
        """Discard the cards between rounds; credits are kept."""
        self.cards.clear()
        self.reveal = not self.is_dealer

    def value(self) -> HandValue:
        return hand_value(self.cards)

    def final_value(self) -> int:
        return final_value(self.cards)

    def dealer_up_card(self) -> Card:
        """Return the dealer's visible card (the second card dealt).

        Raises:
            InvariantError: If called on a player, or before the dealer holds
                            both starting cards.
        """
        if not self.is_dealer:
            raise InvariantError(f"{self.name} is not the dealer and has no up card.")
        if len(self.cards) < 2:
            raise InvariantError("The dealer's up card is not dealt yet.")
        return self.cards[1]

    # ── Credits ───────────────────────────────────────────────────────────────

    def place_bet(self, bet: int) -> None:
        """Debit a pre-validated bet.

        Raises:
            InvariantError: If the bet is not positive or exceeds the credits.
        """
        if self.is_dealer:
            raise InvariantError("The dealer does not bet.")
        if bet <= 0 or not self.credits.covers(bet):
            raise InvariantError(f"Bet {bet} is not covered by credits {self.credits}.")
        self.credits = self.credits.debit(bet)

    def collect(self, amount: int) -> None:
        self.credits = self.credits.credit(amount)

    def can_double_down(self, bet: int) -> bool:
        """Return True if the credits cover another bet and the hard total is
        inside the double-down window."""
        low = self.value().low
        return (
            self.credits.covers(bet)
            and self.rules.double_down_min <= low <= self.rules.double_down_max
        )

    # ── Turn state machine ────────────────────────────────────────────────────

    def play_once(
        self,
        deck: Deck,
        bet: int,
        *,
        dealer_up: Rank | None = None,
        choose_action: ActionSource | None = None,
    ) -> TurnResult:
        """Advance this hand's turn by one step.

        Args:
            deck:          Card source for any card drawn this step.
            bet:           The current bet (0 for the dealer).
            dealer_up:     Rank of the dealer's up card (TABLE strategy).
            choose_action: External action source (INTERACTIVE strategy).

        Returns:
            TurnResult(done, bet, state). ``bet`` is doubled after a
            successful double down.

        Raises:
            DeckExhaustedError: If a card is needed and the deck is empty.
            InvariantError:     If the strategy's required context is missing.
        """
        low, high = self.value()
        if low == MAX_BLACKJACK or high == MAX_BLACKJACK:
            return TurnResult(True, bet, TurnState.BLACKJACK)
        if low > MAX_BLACKJACK:
            return TurnResult(True, bet, TurnState.BUST)

        handler = _TURN_HANDLERS[self.strategy]
        return handler(self, deck, bet, TurnContext(dealer_up, choose_action))

    def play_turn(
        self,
        deck: Deck,
        bet: int,
        *,
        dealer_up: Rank | None = None,
        choose_action: ActionSource | None = None,
    ) -> TurnResult:
        """Run play_once() until the turn reaches a terminal state."""
        while True:
            result = self.play_once(
                deck, bet, dealer_up=dealer_up, choose_action=choose_action
            )
            bet = result.bet
            if result.done:
                return result

    def __str__(self) -> str:
        if self.reveal:
            shown = ' '.join(card_to_str(c) for c in self.cards)
            return f"{self.name}: {shown} ({self.final_value()})"
        hidden = ['??'] + [card_to_str(c) for c in self.cards[1:]]
        return f"{self.name}: {' '.join(hidden)}"


# ─── Strategy handlers ────────────────────────────────────────────────────────

def _dealer_turn(hand: Hand, deck: Deck, bet: int, ctx: TurnContext) -> TurnResult:
    """Dealer rule: stand at the stand total, hard or soft; otherwise draw."""
    low, high = hand.value()
    stand_total = hand.rules.dealer_stand_total
    if low >= stand_total or stand_total <= high < MAX_BLACKJACK:
        return TurnResult(True, bet, TurnState.STAND)
    hand.draw(deck)
    return TurnResult(False, bet, TurnState.ACTIVE)


def _table_turn(hand: Hand, deck: Deck, bet: int, ctx: TurnContext) -> TurnResult:
    """Automated player: follow the decision table."""
    if ctx.dealer_up is None:
        raise InvariantError("The decision table needs the dealer's up card.")
    action = _TABLE_TO_PLAYER[decide(hand.final_value(), ctx.dealer_up)]
    return _apply_action(hand, deck, bet, action)


def _interactive_turn(hand: Hand, deck: Deck, bet: int, ctx: TurnContext) -> TurnResult:
    """Externally driven player: the action source picks, the hand enforces."""
    if ctx.choose_action is None:
        raise InvariantError(f"{hand.name} plays interactively but has no action source.")
    return _apply_action(hand, deck, bet, ctx.choose_action(hand, bet))


def _apply_action(hand: Hand, deck: Deck, bet: int, action: PlayerAction) -> TurnResult:
    if action is PlayerAction.QUIT:
        return TurnResult(True, bet, TurnState.QUIT)

    if action is PlayerAction.STAND:
        return TurnResult(True, bet, TurnState.STAND)

    if action is PlayerAction.DOUBLE_DOWN:
        if hand.can_double_down(bet):
            hand.place_bet(bet)
            hand.draw(deck)
            return TurnResult(True, bet * 2, TurnState.DOUBLED)
        logger.debug("%s cannot double down on %s; hitting instead.", hand.name, hand.value())

    hand.draw(deck)
    return TurnResult(False, bet, TurnState.ACTIVE)


_TURN_HANDLERS: dict[Strategy, Callable[[Hand, Deck, int, TurnContext], TurnResult]] = {
    Strategy.DEALER: _dealer_turn,
    Strategy.TABLE: _table_turn,
    Strategy.INTERACTIVE: _interactive_turn,
}
