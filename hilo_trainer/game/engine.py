"""Blackjack round engine with state machine."""

import logging
from contextlib import contextmanager
from random import Random
from typing import Callable, Iterator

from transitions import Machine, MachineError

from config import GameConfig, config as app_config
from hilo_trainer.cards import Card, Shoe
from hilo_trainer.counting import HiLoSystem, recommended_bet
from hilo_trainer.errors import InvalidBetError
from hilo_trainer.game.events import EventEmitter, EventType, GameEvent
from hilo_trainer.game.narration import Narrator
from hilo_trainer.game.results import HandResult, RoundResult, settle_hand
from hilo_trainer.game.snapshot import TableSnapshot, take_snapshot
from hilo_trainer.game.state import RoundState
from hilo_trainer.hand import Hand
from hilo_trainer.strategy import Action, recommend_action

logger = logging.getLogger(__name__)

# Dealer draws below this total and stands on every 17, soft or hard
DEALER_STANDS_ON = 17


class BlackjackGame:
    """
    Single-player blackjack engine using a state machine.

    Owns the shoe, the Hi-Lo count, the player's hands and bets and the
    balance. Completely UI-agnostic: callers read the query properties or
    ``snapshot()`` and listen to events; every command returns whether it
    was carried out.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_playing", "source": "betting", "dest": "playing"},
        {"trigger": "start_dealer_turn", "source": "playing", "dest": "dealer_turn"},
        {"trigger": "finish_round", "source": "dealer_turn", "dest": "resolved"},
        {"trigger": "start_betting", "source": "resolved", "dest": "betting"},
    ]

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new game.

        Args:
            config: Table configuration (process defaults if not provided)
            rng: Random number generator for reproducible shoes
        """
        self.config = config or app_config.game
        self.shoe = Shoe(
            num_decks=self.config.num_decks,
            numbers_only=self.config.numbers_only,
            rng=rng,
        )
        self.counter = HiLoSystem()
        self.events = EventEmitter()

        self.balance: int = self.config.starting_balance
        self.current_bet: int = 0
        self.starting_balance: int = self.balance
        self.player_hands: list[Hand] = [Hand()]
        self.current_hand_index: int = 0
        self.dealer_hand = Hand()
        self.hole_card_hidden = False
        self.last_result: RoundResult | None = None

        self._busy = False
        self._dealer_steps: Iterator[None] | None = None
        self._message = ""

        self.narrator: Narrator | None = None
        if self.config.narration_enabled:
            self.narrator = Narrator(self.events, hold=self.hold)

        self.create_shoe()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_on_state_change",
        )

    def create_shoe(self) -> None:
        """Rebuild and shuffle the shoe, zeroing the running count."""
        self.shoe.shuffle()
        self.counter.reset()
        logger.info("New shoe: %d cards, running count reset", self.shoe.total_cards)

    def _draw_card(self, visible: bool = True) -> Card:
        """Draw a card, counting it if it is dealt face up."""
        card = self.shoe.draw()
        if visible:
            self.counter.count_card(card)
        return card

    @property
    def running_count(self) -> int:
        """Return the Hi-Lo running count of visible cards."""
        return self.counter.running_count

    @property
    def true_count(self) -> float:
        """Return the true count rounded to 2 decimals."""
        return self.counter.true_count(self.shoe.cards_remaining)

    @property
    def recommended_bet(self) -> int:
        """Return the count-based bet suggestion (not limited by balance)."""
        return recommended_bet(
            self.true_count,
            min_bet=self.config.min_bet,
            unit=self.config.bet_unit,
        )

    @property
    def penetration(self) -> int:
        """Return the dealt share of the shoe as a whole percentage."""
        return self.shoe.penetration_percent

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def _on_state_change(self) -> None:
        self.events.emit_new(EventType.STATE_CHANGED, state=self.state.name)

    @property
    def busy(self) -> bool:
        """Check if an action (or the dealer turn) is in progress."""
        return self._busy or self._dealer_steps is not None

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Keep the engine busy; player commands issued meanwhile are ignored."""
        previous = self._busy
        self._busy = True
        try:
            yield
        finally:
            self._busy = previous

    @property
    def waiting_for_proceed(self) -> bool:
        """Check if the dealer turn is paused until ``proceed()``."""
        return self._dealer_steps is not None

    @property
    def current_hand(self) -> Hand | None:
        """Get the active player hand."""
        if 0 <= self.current_hand_index < len(self.player_hands):
            return self.player_hands[self.current_hand_index]
        return None

    @property
    def dealer_upcard(self) -> Card | None:
        """Return the dealer's face-up card."""
        return self.dealer_hand.cards[0] if self.dealer_hand.cards else None

    def hand_label(self, index: int) -> str:
        """Name a player hand: "Hero", or "Hero 2" once the player has split."""
        if len(self.player_hands) > 1:
            return f"Hero {index + 1}"
        return "Hero"

    @property
    def message(self) -> str:
        """Return the current status line."""
        if self.state == RoundState.PLAYING and not self.busy:
            return f"{self.hand_label(self.current_hand_index)} to act"
        return self._message

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def snapshot(self) -> TableSnapshot:
        """Return a serialisable view of the whole table."""
        return take_snapshot(self)

    @property
    def can_deal(self) -> bool:
        """Check if a new bet can be placed."""
        return (
            self.state in (RoundState.BETTING, RoundState.RESOLVED)
            and not self.busy
            and self.balance > 0
        )

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        if self.state != RoundState.PLAYING or self.busy:
            return False
        hand = self.current_hand
        return hand is not None and hand.value < 21

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.state == RoundState.PLAYING and not self.busy

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        if self.state != RoundState.PLAYING or self.busy:
            return False
        hand = self.current_hand
        return hand is not None and len(hand) == 2 and self.balance >= hand.bet

    @property
    def can_split(self) -> bool:
        """Check if splitting is allowed."""
        if self.state != RoundState.PLAYING or self.busy:
            return False
        hand = self.current_hand
        return hand is not None and hand.is_pair and self.balance >= self.current_bet

    @property
    def recommended_action(self) -> Action | None:
        """Return the advised action for the active hand, if a hand is in play."""
        hand = self.current_hand
        if self.state != RoundState.PLAYING or hand is None or self.dealer_upcard is None:
            return None
        return recommend_action(
            hand,
            self.dealer_upcard,
            self.true_count,
            self.balance,
            self.current_bet,
        )

    def _reject(self, action: str, message: str) -> bool:
        """Report an ineligible command."""
        if not self.busy:
            self.events.emit_new(EventType.INVALID_ACTION, action=action, message=message)
        return False

    def _insufficient_funds(self, action: str, required: int) -> bool:
        self.events.emit_new(
            EventType.INSUFFICIENT_FUNDS,
            action=action,
            required=required,
            available=self.balance,
        )
        return False

    def place_bet(self, amount: int) -> bool:
        """
        Place a bet and deal a new round.

        Args:
            amount: Whole bet amount, at most the current balance

        Returns:
            True if the round was dealt, False if a round is in progress

        Raises:
            InvalidBetError: The amount is not a positive integer within the balance
        """
        if self.state not in (RoundState.BETTING, RoundState.RESOLVED) or self.busy:
            return self._reject("bet", "Cannot bet in current state")

        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidBetError(amount, self.balance)
        if amount <= 0 or amount > self.balance:
            raise InvalidBetError(amount, self.balance)

        with self.hold():
            if self.state == RoundState.RESOLVED:
                self.start_betting()

            self.starting_balance = self.balance
            if self.shoe.needs_shuffle(self.config.shuffle_threshold):
                self.create_shoe()
                self._message = "Deck Shuffled!"
                self.events.emit_new(EventType.SHOE_SHUFFLED, cards=self.shoe.total_cards)
            else:
                self._message = ""

            self.balance -= amount
            self.current_bet = amount
            self.player_hands = [Hand(bet=amount)]
            self.current_hand_index = 0
            self.dealer_hand = Hand()
            self.hole_card_hidden = True
            self.last_result = None
            logger.info("Bet %d placed, balance %d", amount, self.balance)
            self.events.emit_new(EventType.BET_PLACED, amount=amount, balance=self.balance)

            # Deal: player, dealer, player, dealer (face down)
            hand = self.player_hands[0]
            self._deal_to(hand)
            self._deal_to(self.dealer_hand)
            self._deal_to(hand)
            self._deal_to(self.dealer_hand, face_up=False)

            self.start_playing()
            self.events.emit_new(
                EventType.ROUND_STARTED,
                player_cards=list(hand.cards),
                dealer_upcard=self.dealer_upcard,
            )

            if hand.value == 21:
                self._stand()

        return True

    def _deal_to(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self._draw_card(visible=face_up)
        hand.add_card(card)
        is_dealer = hand is self.dealer_hand
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=card if face_up else None,
            hand="dealer" if is_dealer else "player",
            hand_index=None if is_dealer else self._index_of(hand),
            hand_value=hand.value if face_up or not is_dealer else None,
        )
        return card

    def _index_of(self, hand: Hand) -> int:
        # Identity, not equality: split hands can hold identical cards
        return next(i for i, h in enumerate(self.player_hands) if h is hand)

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        if not self.can_hit:
            return self._reject("hit", "Cannot hit")

        with self.hold():
            index = self.current_hand_index
            hand = self.player_hands[index]
            self._message = f"{self.hand_label(index)} chooses to Hit"

            card = self._deal_to(hand)
            self.events.emit_new(
                EventType.PLAYER_HIT,
                hand_index=index,
                card=card,
                hand_value=hand.value,
            )

            if hand.is_busted:
                self.events.emit_new(
                    EventType.PLAYER_BUSTS, hand_index=index, hand_value=hand.value
                )
            if hand.value >= 21:
                self._advance_to_next_hand()

        return True

    def stand(self) -> bool:
        """Player stands (keeps current hand)."""
        if not self.can_stand:
            return self._reject("stand", "Cannot stand")

        with self.hold():
            self._stand()

        return True

    def _stand(self) -> None:
        index = self.current_hand_index
        self._message = f"{self.hand_label(index)} chooses to Stand"
        self.events.emit_new(
            EventType.PLAYER_STAND,
            hand_index=index,
            hand_value=self.player_hands[index].value,
        )
        self._advance_to_next_hand()

    def double_down(self) -> bool:
        """Player doubles down: one more stake, exactly one more card."""
        hand = self.current_hand
        if not self.can_double:
            if (
                self.state == RoundState.PLAYING
                and not self.busy
                and hand is not None
                and len(hand) == 2
            ):
                return self._insufficient_funds("double", hand.bet)
            return self._reject("double", "Cannot double")

        with self.hold():
            index = self.current_hand_index
            self._message = f"{self.hand_label(index)} chooses to Double"

            self.balance -= hand.bet
            hand.bet *= 2
            hand.is_doubled = True

            card = self._deal_to(hand)
            self.events.emit_new(
                EventType.PLAYER_DOUBLE,
                hand_index=index,
                card=card,
                hand_value=hand.value,
                new_bet=hand.bet,
            )

            if hand.is_busted:
                self.events.emit_new(
                    EventType.PLAYER_BUSTS, hand_index=index, hand_value=hand.value
                )

            self._advance_to_next_hand()

        return True

    def split(self) -> bool:
        """Player splits a pair into two hands."""
        hand = self.current_hand
        if not self.can_split:
            if self.state == RoundState.PLAYING and not self.busy and hand is not None and hand.is_pair:
                return self._insufficient_funds("split", self.current_bet)
            return self._reject("split", "Cannot split")

        with self.hold():
            index = self.current_hand_index
            self._message = f"{self.hand_label(index)} chooses to Split"

            self.balance -= self.current_bet

            # Create new hand with second card
            second_card = hand.cards.pop()
            new_hand = Hand(cards=[second_card], bet=self.current_bet, is_split_hand=True)
            hand.is_split_hand = True
            self.player_hands.append(new_hand)

            # Deal one card to each hand
            self._deal_to(hand)
            self._deal_to(new_hand)

            self.events.emit_new(
                EventType.PLAYER_SPLIT,
                hand_index=index,
                hand_values=[hand.value, new_hand.value],
                hands=len(self.player_hands),
            )

        return True

    def play_recommended(self) -> bool:
        """
        Carry out the recommended move.

        While playing this runs the advised action when it is allowed; between
        rounds it deals with the recommended bet, capped at the balance.
        """
        if self.state in (RoundState.BETTING, RoundState.RESOLVED):
            if not self.can_deal:
                return False
            return self.place_bet(min(self.recommended_bet, self.balance))

        commands = {
            Action.HIT: (self.can_hit, self.hit),
            Action.STAND: (self.can_stand, self.stand),
            Action.DOUBLE: (self.can_double, self.double_down),
            Action.SPLIT: (self.can_split, self.split),
        }
        action = self.recommended_action
        if action is None:
            return False
        allowed, command = commands[action]
        return command() if allowed else False

    def proceed(self) -> bool:
        """Run the next paused dealer step, unless the engine is held."""
        if self._dealer_steps is None or self._busy:
            return False
        self._step_dealer()
        return True

    def _advance_to_next_hand(self) -> None:
        """Move to the next hand or the dealer turn."""
        if self.current_hand_index < len(self.player_hands) - 1:
            self.current_hand_index += 1
            self.events.emit_new(
                EventType.ACTIVE_HAND_CHANGED, hand_index=self.current_hand_index
            )
            return

        self.start_dealer_turn()
        self._dealer_steps = self._play_dealer()
        if self.config.pause_dealer:
            self._step_dealer()
        else:
            for _ in self._dealer_steps:
                pass
            self._dealer_steps = None

    def _step_dealer(self) -> None:
        """Run the dealer up to the next pause point."""
        with self.hold():
            try:
                next(self._dealer_steps)
            except StopIteration:
                self._dealer_steps = None
                return
        self.events.emit_new(EventType.WAITING_FOR_PROCEED)

    def _play_dealer(self) -> Iterator[None]:
        """Dealer reveals and draws; yields at each pause point."""
        yield

        hole_card = self.dealer_hand.cards[1]
        self.counter.count_card(hole_card)
        self.hole_card_hidden = False
        self._message = "Dealer reveals"
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=hole_card,
            hand_value=self.dealer_hand.value,
        )

        while self.dealer_hand.value < DEALER_STANDS_ON:
            yield
            self._message = "Dealer chooses to Hit"
            card = self._deal_to(self.dealer_hand)
            self.events.emit_new(
                EventType.DEALER_HITS,
                card=card,
                hand_value=self.dealer_hand.value,
            )

        yield
        if self.dealer_hand.is_busted:
            self._message = "Dealer busts!"
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
        else:
            self._message = "Dealer chooses to Stand"
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        yield
        self.resolve_game()

    def resolve_game(self) -> RoundResult:
        """Settle every player hand against the dealer and pay out."""
        if self.state != RoundState.DEALER_TURN:
            raise MachineError("Hands are settled only at the end of the dealer turn")

        dealer_score = self.dealer_hand.value
        multiple_hands = len(self.player_hands) > 1
        results: list[HandResult] = []

        for i, hand in enumerate(self.player_hands):
            outcome, payout = settle_hand(hand, dealer_score)
            self.balance += payout
            result = HandResult(
                index=i,
                label=self.hand_label(i),
                outcome=outcome,
                player_score=hand.value,
                dealer_score=dealer_score,
                bet=hand.bet,
                payout=payout,
            )
            results.append(result)
            self.events.emit_new(
                EventType.BET_RESOLVED,
                result=result,
                multiple_hands=multiple_hands,
            )

        round_result = RoundResult(
            starting_balance=self.starting_balance,
            balance=self.balance,
            dealer_score=dealer_score,
            hands=results,
        )
        self.last_result = round_result
        self._message = round_result.summary
        logger.info("Round settled: %s", round_result.summary)

        self.finish_round()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            summary=round_result.summary,
            net_change=round_result.net_change,
            balance=self.balance,
        )
        return round_result
