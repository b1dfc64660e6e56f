"""Card counting."""

from hilo_trainer.counting.base import CountingSystem
from hilo_trainer.counting.hilo import HiLoSystem
from hilo_trainer.counting.betting import recommended_bet

__all__ = [
    "CountingSystem",
    "HiLoSystem",
    "recommended_bet",
]
