"""Basic strategy advisor with Hi-Lo index plays."""

from hilo_trainer.cards import Card, Rank
from hilo_trainer.hand import Hand
from hilo_trainer.strategy.actions import Action
from hilo_trainer.strategy.deviations import find_deviation

# Pair rank -> dealer upcards to split against
_ALWAYS = frozenset(range(2, 12))
_PAIR_SPLITS: dict[Rank, frozenset[int]] = {
    Rank.ACE: _ALWAYS,
    Rank.EIGHT: _ALWAYS,
    Rank.TWO: frozenset(range(2, 8)),
    Rank.THREE: frozenset(range(2, 8)),
    Rank.SEVEN: frozenset(range(2, 8)),
    Rank.FOUR: frozenset({5, 6}),
    Rank.SIX: frozenset(range(2, 7)),
    Rank.NINE: frozenset({2, 3, 4, 5, 6, 8, 9}),
}


def dealer_upcard_value(card: Card) -> int:
    """Return the upcard value used by strategy tables (2-11, Ace = 11)."""
    return card.value


def _pair_action(hand: Hand, dealer: int) -> Action | None:
    if dealer in _PAIR_SPLITS.get(hand.cards[0].rank, frozenset()):
        return Action.SPLIT
    return None


def _soft_action(total: int, dealer: int) -> Action:
    if total >= 19:
        return Action.STAND
    if total == 18:
        if dealer <= 6:
            return Action.DOUBLE
        if dealer <= 8:
            return Action.STAND
        return Action.HIT
    if dealer in (5, 6) or (dealer == 4 and total >= 15):
        return Action.DOUBLE
    return Action.HIT


def _hard_action(total: int, dealer: int) -> Action | None:
    if total >= 17:
        return Action.STAND
    if total >= 13 and dealer <= 6:
        return Action.STAND
    if total == 12 and 4 <= dealer <= 6:
        return Action.STAND
    if total == 11:
        return Action.DOUBLE
    if total == 10 and dealer <= 9:
        return Action.DOUBLE
    if total == 9 and 3 <= dealer <= 6:
        return Action.DOUBLE
    return None


def recommend_action(
    hand: Hand,
    dealer_upcard: Card,
    true_count: float,
    balance: int,
    current_bet: int,
) -> Action:
    """
    Recommend an action for the active hand.

    Rules are tried in a fixed order and the first match wins: pair
    splitting, two-card soft totals, hard totals, then the count-based
    index plays. Anything left over is a hit.

    Args:
        hand: The player's active hand
        dealer_upcard: The dealer's face-up card
        true_count: Current true count
        balance: Player balance, used to check a split is affordable
        current_bet: The round's base bet

    Returns:
        The recommended action
    """
    dealer = dealer_upcard_value(dealer_upcard)
    total = hand.value

    if hand.is_pair and balance >= current_bet:
        action = _pair_action(hand, dealer)
        if action:
            return action

    if hand.has_ace and total <= 21 and len(hand) == 2:
        return _soft_action(total, dealer)

    action = _hard_action(total, dealer)
    if action:
        return action

    deviation = find_deviation(total, dealer, true_count)
    if deviation:
        return deviation.deviation_action

    return Action.HIT
