"""Card and Shoe classes - immutable card representations."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterator

from hilo_trainer.errors import EmptyShoeError

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10  # Face cards

    @property
    def low_value(self) -> int:
        """Return the point value with the Ace counted as 1."""
        return 1 if self == Rank.ACE else self.blackjack_value

    @property
    def spoken_name(self) -> str:
        """Return the name used when a card is read aloud."""
        return {
            Rank.JACK: "Jack",
            Rank.QUEEN: "Queen",
            Rank.KING: "King",
            Rank.ACE: "Ace",
        }.get(self, str(self.value))

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self.blackjack_value == 10


# Ranks of one suit. Numbers-only decks print every ten-valued card as a 10.
STANDARD_RANKS: tuple[Rank, ...] = tuple(Rank)
NUMBERS_ONLY_RANKS: tuple[Rank, ...] = tuple(
    Rank.TEN if rank.is_ten_value else rank for rank in Rank
)

_RANK_MAP = {
    "1": Rank.ACE,
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_MAP = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh' or '1d'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_MAP:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_MAP:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_MAP[rank_str], _SUIT_MAP[suit_str])


def build_deck(numbers_only: bool = False) -> list[Card]:
    """Return one ordered 52-card deck."""
    ranks = NUMBERS_ONLY_RANKS if numbers_only else STANDARD_RANKS
    return [Card(rank, suit) for suit in Suit for rank in ranks]


class Shoe:
    """A multi-deck shoe for blackjack."""

    def __init__(
        self,
        num_decks: int = 2,
        numbers_only: bool = False,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a shoe with multiple decks.

        Args:
            num_decks: Number of decks in the shoe
            numbers_only: Replace J/Q/K with plain 10s
            rng: Random number generator for shuffling
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._numbers_only = numbers_only
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset shoe to all cards from all decks, in deck order."""
        self._cards = [
            card
            for _ in range(self._num_decks)
            for card in build_deck(self._numbers_only)
        ]

    def shuffle(self) -> None:
        """Refill the shoe and shuffle it (Fisher-Yates)."""
        self.reset()
        self._rng.shuffle(self._cards)
        logger.info(
            "Shuffled %d-deck shoe (%d cards)", self._num_decks, len(self._cards)
        )

    def draw(self) -> Card:
        """Draw the last card of the shoe."""
        if not self._cards:
            raise EmptyShoeError("Cannot draw from empty shoe")
        return self._cards.pop()

    def stack(self, cards: list[Card]) -> None:
        """
        Replace the shoe contents with a fixed sequence.

        Cards are drawn from the end of the list, so ``cards[-1]`` comes out
        first. Used to script deals in drills and tests.
        """
        self._cards = list(cards)

    def needs_shuffle(self, threshold: float) -> bool:
        """Check if fewer than ``threshold`` of the full shoe remains."""
        return len(self._cards) / self.total_cards < threshold

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt."""
        return self.total_cards - len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the total number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    @property
    def numbers_only(self) -> bool:
        """Return whether face cards are printed as 10s."""
        return self._numbers_only

    @property
    def decks_remaining(self) -> float:
        """Return the estimated number of decks remaining."""
        return len(self._cards) / CARDS_PER_DECK

    @property
    def penetration_percent(self) -> int:
        """Return the dealt share of the shoe as a whole percentage."""
        # Halves round up
        return (self.cards_dealt * 200 + self.total_cards) // (self.total_cards * 2)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
