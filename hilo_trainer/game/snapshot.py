"""Pydantic views of the table for the presentation layer."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hilo_trainer.cards import Card
from hilo_trainer.game.state import RoundState
from hilo_trainer.hand import Hand

if TYPE_CHECKING:
    from hilo_trainer.game.engine import BlackjackGame


class CardView(BaseModel):
    """Card representation."""

    model_config = ConfigDict(frozen=True)

    rank: str
    suit: str
    value: int
    name: str

    @classmethod
    def from_card(cls, card: Card) -> "CardView":
        return cls(
            rank=str(card.rank),
            suit=card.suit.name.lower(),
            value=card.value,
            name=card.rank.spoken_name,
        )


class HandView(BaseModel):
    """Hand representation."""

    label: str
    cards: list[CardView]
    value: int
    display_score: str
    bet: int
    is_active: bool = False
    is_busted: bool
    is_doubled: bool = False


class DealerView(BaseModel):
    """Dealer hand; the hole card is omitted while hidden."""

    cards: list[CardView]
    hole_card_hidden: bool
    display_score: str


class ActionsView(BaseModel):
    """Which commands the player may issue right now."""

    can_deal: bool
    can_hit: bool
    can_stand: bool
    can_double: bool
    can_split: bool
    waiting_for_proceed: bool


class TableSnapshot(BaseModel):
    """Everything the presentation layer needs to draw the table."""

    state: str
    busy: bool
    message: str
    balance: int
    current_bet: int
    running_count: int
    true_count: float
    recommended_bet: int
    penetration: int
    cards_remaining: int
    dealer: DealerView
    player_hands: list[HandView]
    current_hand_index: int
    recommended_action: str | None
    actions: ActionsView


def _dealer_view(game: "BlackjackGame") -> DealerView:
    hand = game.dealer_hand
    if game.hole_card_hidden:
        shown = hand.cards[:1]
        score = "?"
    else:
        shown = hand.cards
        score = hand.display_value if hand.cards else ""
    return DealerView(
        cards=[CardView.from_card(c) for c in shown],
        hole_card_hidden=game.hole_card_hidden,
        display_score=score,
    )


def _hand_view(game: "BlackjackGame", index: int, hand: Hand, playing: bool) -> HandView:
    return HandView(
        label=game.hand_label(index),
        cards=[CardView.from_card(c) for c in hand.cards],
        value=hand.value,
        display_score=hand.display_value,
        bet=hand.bet,
        is_active=playing and index == game.current_hand_index,
        is_busted=hand.is_busted,
        is_doubled=hand.is_doubled,
    )


def take_snapshot(game: "BlackjackGame") -> TableSnapshot:
    """Build a snapshot of the game's query surface."""
    playing = game.state == RoundState.PLAYING
    action = game.recommended_action
    return TableSnapshot(
        state=game.state.name.lower(),
        busy=game.busy,
        message=game.message,
        balance=game.balance,
        current_bet=game.current_bet,
        running_count=game.running_count,
        true_count=game.true_count,
        recommended_bet=game.recommended_bet,
        penetration=game.penetration,
        cards_remaining=game.shoe.cards_remaining,
        dealer=_dealer_view(game),
        player_hands=[
            _hand_view(game, i, hand, playing) for i, hand in enumerate(game.player_hands)
        ],
        current_hand_index=game.current_hand_index,
        recommended_action=str(action) if action else None,
        actions=ActionsView(
            can_deal=game.can_deal,
            can_hit=game.can_hit,
            can_stand=game.can_stand,
            can_double=game.can_double,
            can_split=game.can_split,
            waiting_for_proceed=game.waiting_for_proceed,
        ),
    )
