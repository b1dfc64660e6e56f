"""Round engine and state management."""

from hilo_trainer.game.events import GameEvent, EventType
from hilo_trainer.game.state import RoundState
from hilo_trainer.game.results import HandResult, Outcome, RoundResult
from hilo_trainer.game.engine import BlackjackGame
from hilo_trainer.game.narration import Narrator, card_narrative
from hilo_trainer.game.snapshot import TableSnapshot

__all__ = [
    "GameEvent",
    "EventType",
    "RoundState",
    "HandResult",
    "Outcome",
    "RoundResult",
    "BlackjackGame",
    "Narrator",
    "card_narrative",
    "TableSnapshot",
]
