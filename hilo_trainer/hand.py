"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from hilo_trainer.cards import Card


def hard_low_value(cards: Iterable[Card]) -> int:
    """Sum the cards with every Ace counted as 1."""
    return sum(card.rank.low_value for card in cards)


def best_score(cards: Iterable[Card]) -> int:
    """
    Calculate the best blackjack total.

    Aces start at 11 and are demoted to 1 one at a time while the total
    is over 21. Returns the lowest bust total when every Ace is already low.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
            total += 11
        else:
            total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total


def display_score(cards: Iterable[Card]) -> str:
    """
    Format a total for display.

    Hands holding an Ace show both totals ("7 / 17") while the high one
    does not bust.
    """
    cards = list(cards)
    low = hard_low_value(cards)
    if not any(card.is_ace for card in cards):
        return str(low)

    high = low + 10
    if high <= 21:
        return f"{low} / {high}"
    return str(low)


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    is_doubled: bool = False
    is_split_hand: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    @property
    def value(self) -> int:
        """Return the best total (see ``best_score``)."""
        return best_score(self.cards)

    @property
    def hard_value(self) -> int:
        """Return the total with every Ace counted as 1."""
        return hard_low_value(self.cards)

    @property
    def display_value(self) -> str:
        """Return the display form of the total."""
        return display_score(self.cards)

    @property
    def has_ace(self) -> bool:
        """Check if the hand holds at least one Ace."""
        return any(card.is_ace for card in self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        return self.has_ace and self.hard_value + 10 <= 21

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return (
            len(self.cards) == 2
            and self.value == 21
            and not self.is_split_hand
        )

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a pair (two cards of same rank)."""
        return (
            len(self.cards) == 2
            and self.cards[0].rank == self.cards[1].rank
        )

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
