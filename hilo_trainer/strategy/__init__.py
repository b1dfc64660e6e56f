"""Basic strategy and count-based deviations."""

from hilo_trainer.strategy.actions import Action
from hilo_trainer.strategy.advisor import dealer_upcard_value, recommend_action
from hilo_trainer.strategy.deviations import IndexPlay, INDEX_PLAYS, find_deviation

__all__ = [
    "Action",
    "dealer_upcard_value",
    "recommend_action",
    "IndexPlay",
    "INDEX_PLAYS",
    "find_deviation",
]
