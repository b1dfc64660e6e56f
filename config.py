"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

# Fewest cards the reshuffle point may leave for the next round.
MIN_RESHUFFLE_RESERVE = 26


def _env_bool(name: str, default: str = "false") -> bool:
    """Read a boolean flag such as ``1``/``true``/``yes`` from the environment."""
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GameConfig:
    """Table and trainer configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("BLACKJACK_DECKS", "2")))
    shuffle_threshold: float = field(
        default_factory=lambda: float(os.getenv("BLACKJACK_SHUFFLE_THRESHOLD", "0.25"))
    )
    starting_balance: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_BALANCE", "200"))
    )
    min_bet: int = 1
    bet_unit: int = 10

    # Face cards printed as plain 10s
    numbers_only: bool = field(default_factory=lambda: _env_bool("BLACKJACK_NUMBERS_ONLY"))
    # Dealer waits for proceed() between steps
    pause_dealer: bool = field(default_factory=lambda: _env_bool("BLACKJACK_PAUSE_DEALER"))
    narration_enabled: bool = field(
        default_factory=lambda: _env_bool("BLACKJACK_NARRATION", "true")
    )

    def __post_init__(self) -> None:
        """Validate setting combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not 0.0 < self.shuffle_threshold < 1.0:
            raise ValueError("shuffle_threshold must be between 0 and 1")
        if self.reshuffle_reserve < MIN_RESHUFFLE_RESERVE:
            raise ValueError(
                f"shuffle_threshold leaves {self.reshuffle_reserve} cards in reserve, "
                f"need at least {MIN_RESHUFFLE_RESERVE}"
            )
        if self.starting_balance < 0:
            raise ValueError("starting_balance cannot be negative")
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.bet_unit < 0:
            raise ValueError("bet_unit cannot be negative")

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self.num_decks * 52

    @property
    def reshuffle_reserve(self) -> int:
        """Return the fewest cards left in the shoe when a round starts."""
        return int(self.total_cards * self.shuffle_threshold)


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    game: GameConfig = field(default_factory=GameConfig)


# Global configuration instance
config = AppConfig()
