"""Blackjack trainer engine with Hi-Lo counting - 100% UI-agnostic."""

from hilo_trainer.cards import Card, Shoe, Rank, Suit
from hilo_trainer.hand import Hand
from hilo_trainer.errors import EmptyShoeError, InvalidBetError, TrainerError

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "EmptyShoeError",
    "InvalidBetError",
    "TrainerError",
]
