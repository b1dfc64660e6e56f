"""Spoken descriptions of game events."""

import logging
from collections import deque
from contextlib import AbstractContextManager, nullcontext
from typing import Awaitable, Callable

from hilo_trainer.cards import Card
from hilo_trainer.game.events import EventEmitter, EventType, GameEvent
from hilo_trainer.game.results import HandResult, Outcome

logger = logging.getLogger(__name__)

SpeakFn = Callable[[str], Awaitable[None]]


def card_narrative(card: Card) -> str:
    """Name a card with its article: "an Ace", "an 8", "a King"."""
    name = card.rank.spoken_name
    article = "an" if name in ("Ace", "8") else "a"
    return f"{article} {name}"


def _bust_sentence(subject: str, score: int) -> str:
    return f"{subject} because the score is {score}, which is greater than 21."


def settlement_sentence(result: HandResult, multiple_hands: bool = False) -> str:
    """Describe how one hand was settled."""
    if result.outcome == Outcome.BUST:
        who = result.label if multiple_hands else "Hero"
        return _bust_sentence(f"{who} busts", result.player_score)
    if result.outcome == Outcome.WIN and result.dealer_busted:
        return "You win because the dealer busts."
    if result.outcome == Outcome.PUSH:
        return f"It's a push with a score of {result.player_score}."
    verb = "win" if result.outcome == Outcome.WIN else "lose"
    return (
        f"You {verb} because you have a score of {result.player_score} "
        f"and the dealer has a score of {result.dealer_score}."
    )


class Narrator:
    """
    Turns engine events into sentences for a speech or caption collaborator.

    The engine never waits on narration: sentences are queued as events
    arrive and a consumer drains them at its own pace with ``narrate``.
    """

    def __init__(
        self,
        events: EventEmitter,
        hold: Callable[[], AbstractContextManager] | None = None,
    ) -> None:
        """
        Attach to an event emitter.

        Args:
            events: Emitter to subscribe to
            hold: Context manager factory keeping the engine busy while speaking
        """
        self._pending: deque[str] = deque()
        self._hold = hold or nullcontext
        self._handlers: dict[EventType, Callable[[GameEvent], str | None]] = {
            EventType.ROUND_STARTED: self._on_round_started,
            EventType.PLAYER_HIT: self._on_player_card,
            EventType.PLAYER_STAND: self._on_stand,
            EventType.PLAYER_DOUBLE: self._on_double,
            EventType.PLAYER_SPLIT: self._on_split,
            EventType.PLAYER_BUSTS: self._on_player_bust,
            EventType.DEALER_REVEALS: self._on_reveal,
            EventType.DEALER_HITS: self._on_dealer_hit,
            EventType.DEALER_STANDS: self._on_dealer_stand,
            EventType.DEALER_BUSTS: self._on_dealer_bust,
            EventType.BET_RESOLVED: self._on_bet_resolved,
        }
        self._events = events
        events.subscribe(self._on_event)

    def detach(self) -> None:
        """Stop listening to the engine."""
        self._events.unsubscribe(self._on_event)

    def _on_event(self, event: GameEvent) -> None:
        handler = self._handlers.get(event.event_type)
        if handler is None:
            return
        sentence = handler(event)
        if sentence:
            logger.debug("Narration: %s", sentence)
            self._pending.append(sentence)

    def _on_round_started(self, event: GameEvent) -> str:
        first, second = event.data["player_cards"]
        return f"You are dealt {card_narrative(first)} and {card_narrative(second)}."

    def _on_player_card(self, event: GameEvent) -> str:
        return f"You are dealt {card_narrative(event.data['card'])}."

    def _on_stand(self, event: GameEvent) -> str:
        return f"You stand with a score of {event.data['hand_value']}."

    def _on_double(self, event: GameEvent) -> str:
        return f"You double down with a score of {event.data['hand_value']}."

    def _on_split(self, event: GameEvent) -> str:
        first, second = event.data["hand_values"]
        return f"You split with a score of {first} for hand 1 and {second} for hand 2."

    def _on_player_bust(self, event: GameEvent) -> str:
        return _bust_sentence("You bust", event.data["hand_value"])

    def _on_reveal(self, event: GameEvent) -> str:
        return f"The dealer reveals {card_narrative(event.data['card'])}."

    def _on_dealer_hit(self, event: GameEvent) -> str:
        return f"The dealer hits and is dealt {card_narrative(event.data['card'])}."

    def _on_dealer_stand(self, event: GameEvent) -> str:
        return f"The dealer stands with a score of {event.data['hand_value']}."

    def _on_dealer_bust(self, event: GameEvent) -> str:
        return _bust_sentence("Dealer busts", event.data["hand_value"])

    def _on_bet_resolved(self, event: GameEvent) -> str:
        return settlement_sentence(event.data["result"], event.data["multiple_hands"])

    @property
    def pending(self) -> list[str]:
        """Sentences not yet narrated, oldest first."""
        return list(self._pending)

    def drain(self) -> list[str]:
        """Remove and return every queued sentence."""
        sentences = list(self._pending)
        self._pending.clear()
        return sentences

    async def narrate(self, speak: SpeakFn) -> int:
        """
        Speak queued sentences in order, holding the engine busy meanwhile.

        Sentences queued while speaking are spoken in the same call.

        Returns:
            Number of sentences spoken
        """
        spoken = 0
        with self._hold():
            while self._pending:
                await speak(self._pending.popleft())
                spoken += 1
        return spoken
