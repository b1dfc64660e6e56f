"""Abstract base class for card counting systems."""

from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping

from hilo_trainer.cards import CARDS_PER_DECK, Card, Rank

# Decks remaining never drops below half a deck when normalising the count.
MIN_CARDS_REMAINING = CARDS_PER_DECK // 2


class CountingSystem(ABC):
    """
    Abstract base class for card counting systems.

    Tracks a running count over visible cards and derives a true count
    from the cards left in the shoe.
    """

    def __init__(self) -> None:
        """Initialize the counting system."""
        self._running_count: int = 0
        self._cards_seen: int = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the counting system."""
        ...

    @property
    @abstractmethod
    def tag_values(self) -> Mapping[Rank, int]:
        """
        Return the tag value mapping for this system.

        Maps each Rank to its count value.
        """
        ...

    @property
    def full_deck_sum(self) -> int:
        """Sum of tag values over a standard 52-card deck."""
        # Each rank appears 4 times in a deck (once per suit)
        return sum(self.tag_values[rank] * 4 for rank in Rank)

    def count_card(self, card: Card) -> int:
        """
        Count a single card and update the running count.

        Args:
            card: The card to count

        Returns:
            The tag value of the card
        """
        tag_value = self.tag_values[card.rank]
        self._running_count += tag_value
        self._cards_seen += 1
        return tag_value

    def count_cards(self, cards: Iterable[Card]) -> int:
        """Count several cards and return their combined tag value."""
        return sum(self.count_card(card) for card in cards)

    @property
    def running_count(self) -> int:
        """Return the current running count."""
        return self._running_count

    def true_count(self, cards_remaining: int) -> float:
        """
        Calculate the true count.

        The running count is divided by the decks remaining, floored at
        half a deck, and rounded half away from zero to 2 decimals. The
        rounded figure is the one shown to the player and used for
        betting and strategy decisions.

        Args:
            cards_remaining: Number of cards left in the shoe

        Returns:
            The true count
        """
        # running / (cards / 52) in exact decimal arithmetic
        cards = max(MIN_CARDS_REMAINING, cards_remaining)
        exact = Decimal(self._running_count * CARDS_PER_DECK) / Decimal(cards)
        return float(exact.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    @property
    def cards_seen(self) -> int:
        """Return the number of cards seen."""
        return self._cards_seen

    def reset(self) -> None:
        """Reset the count to zero."""
        self._running_count = 0
        self._cards_seen = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running_count={self._running_count})"
