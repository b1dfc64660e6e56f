"""Pytest fixtures for blackjack trainer tests."""

import pytest
from random import Random

from config import GameConfig
from hilo_trainer.cards import Card, Shoe, Rank, Suit
from hilo_trainer.hand import Hand
from hilo_trainer.counting import HiLoSystem
from hilo_trainer.game import BlackjackGame

# Filler sits under scripted cards so the shoe stays above the reshuffle mark
FILLER = Card(Rank.NINE, Suit.CLUBS)
FILLER_COUNT = 60


def make_hand(*codes: str, bet: int = 0) -> Hand:
    """Build a hand from card strings such as "AS", "10h", "8d"."""
    return Hand(cards=[Card.from_string(code) for code in codes], bet=bet)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 2-deck shoe."""
    s = Shoe(num_decks=2, rng=rng)
    s.shuffle()
    return s


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return make_hand("8S", "8H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def game_config():
    """Default table: 2 decks, 25% reshuffle, 200 balance, no dealer pauses."""
    return GameConfig(
        num_decks=2,
        shuffle_threshold=0.25,
        starting_balance=200,
        numbers_only=False,
        pause_dealer=False,
        narration_enabled=True,
    )


@pytest.fixture
def game(game_config, rng):
    """A new game instance."""
    return BlackjackGame(config=game_config, rng=rng)


@pytest.fixture
def stack_shoe():
    """
    Script the next cards out of a game's shoe.

    Cards are given in deal order; the initial deal goes player, dealer up,
    player, dealer hole.
    """

    def _stack(game: BlackjackGame, *codes: str) -> None:
        scripted = [Card.from_string(code) for code in codes]
        game.shoe.stack([FILLER] * FILLER_COUNT + list(reversed(scripted)))

    return _stack
