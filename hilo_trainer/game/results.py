"""Settlement of player hands against the dealer."""

from dataclasses import dataclass, field
from enum import Enum, auto

from hilo_trainer.hand import Hand


class Outcome(Enum):
    """Result of one player hand."""

    WIN = auto()
    LOSE = auto()
    PUSH = auto()
    BUST = auto()

    def __str__(self) -> str:
        return self.name.title()


# Payout multiple of the hand's bet. Stakes were taken when placed, so a
# win returns the stake plus even money and a push returns the stake only.
# A natural is paid like any other win.
PAYOUT_MULTIPLES: dict[Outcome, int] = {
    Outcome.WIN: 2,
    Outcome.PUSH: 1,
    Outcome.LOSE: 0,
    Outcome.BUST: 0,
}


def settle_hand(hand: Hand, dealer_score: int) -> tuple[Outcome, int]:
    """
    Compare a player hand with the dealer's final total.

    Returns:
        The outcome and the amount returned to the balance
    """
    player_score = hand.value

    if player_score > 21:
        outcome = Outcome.BUST
    elif dealer_score > 21 or player_score > dealer_score:
        outcome = Outcome.WIN
    elif player_score < dealer_score:
        outcome = Outcome.LOSE
    else:
        outcome = Outcome.PUSH

    return outcome, hand.bet * PAYOUT_MULTIPLES[outcome]


@dataclass(frozen=True)
class HandResult:
    """Settlement of a single player hand."""

    index: int
    label: str
    outcome: Outcome
    player_score: int
    dealer_score: int
    bet: int
    payout: int

    @property
    def dealer_busted(self) -> bool:
        return self.dealer_score > 21


@dataclass(frozen=True)
class RoundResult:
    """Settlement of a whole round."""

    starting_balance: int
    balance: int
    dealer_score: int
    hands: list[HandResult] = field(default_factory=list)

    @property
    def net_change(self) -> int:
        """Balance after settlement minus the balance before the bet."""
        return self.balance - self.starting_balance

    @property
    def summary(self) -> str:
        """One-line summary, e.g. ``Hero 1: Win | Hero 2: Bust [200+0]``."""
        if len(self.hands) > 1:
            parts = [f"{r.label}: {r.outcome}" for r in self.hands]
        else:
            parts = [str(r.outcome) for r in self.hands]
        sign = "+" if self.net_change >= 0 else ""
        return " | ".join(parts) + f" [{self.starting_balance}{sign}{self.net_change}]"
