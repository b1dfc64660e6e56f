"""Game events for the event system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of game events."""

    # Round flow events
    STATE_CHANGED = auto()
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()

    # Betting events
    BET_PLACED = auto()
    BET_RESOLVED = auto()

    # Card events
    CARD_DEALT = auto()
    SHOE_SHUFFLED = auto()

    # Player action events
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()
    PLAYER_SPLIT = auto()
    PLAYER_BUSTS = auto()
    ACTIVE_HAND_CHANGED = auto()

    # Dealer events
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()
    WAITING_FOR_PROCEED = auto()

    # Error events
    INVALID_ACTION = auto()
    INSUFFICIENT_FUNDS = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the primary communication mechanism between the engine
    and the presentation layer.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Simple event emitter for game events.

    Allows subscribing to specific event types or all events.
    """

    def __init__(self) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
            except ValueError:
                pass

    def emit(self, event: GameEvent) -> None:
        """Record an event and pass it to type-specific, then catch-all handlers."""
        self._event_history.append(event)

        for handler in list(self._handlers.get(event.event_type, [])):
            handler(event)

        for handler in list(self._handlers.get(None, [])):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
