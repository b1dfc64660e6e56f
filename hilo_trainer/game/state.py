"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: BETTING → PLAYING → DEALER_TURN → RESOLVED → BETTING
    """

    # Waiting for the first bet of a shoe session
    BETTING = auto()

    # Player acts on each of their hands in turn
    PLAYING = auto()

    # Dealer reveals and draws
    DEALER_TURN = auto()

    # Bets settled, ready for the next bet
    RESOLVED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()
