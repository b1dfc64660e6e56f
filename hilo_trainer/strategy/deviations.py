"""Strategy deviations based on true count (Illustrious 18 subset)."""

from dataclasses import dataclass

from hilo_trainer.strategy.actions import Action


@dataclass(frozen=True)
class IndexPlay:
    """
    An index play (strategy deviation based on count).

    When the true count meets or exceeds the index, deviate from basic strategy.
    """

    player_total: int
    dealer_upcard: int  # 2-11 (11 = Ace)

    # Played at or above the index
    deviation_action: Action

    index: float

    # Description for training
    description: str = ""

    def should_deviate(self, true_count: float) -> bool:
        """Check if the deviation should be taken at the given true count."""
        return true_count >= self.index


# Only the hard-total stand deviations are played; both are checked after
# the basic hard-total rules have had their say.
INDEX_PLAYS: list[IndexPlay] = [
    # 16 vs 10: Stand at 0+
    IndexPlay(
        player_total=16,
        dealer_upcard=10,
        deviation_action=Action.STAND,
        index=0.0,
        description="Stand on 16 vs 10 at TC 0 or higher",
    ),
    # 15 vs 10: Stand at +4
    IndexPlay(
        player_total=15,
        dealer_upcard=10,
        deviation_action=Action.STAND,
        index=4.0,
        description="Stand on 15 vs 10 at TC +4 or higher",
    ),
]


def find_deviation(
    player_total: int,
    dealer_upcard: int,
    true_count: float,
) -> IndexPlay | None:
    """
    Find the index play that applies to the given situation.

    Args:
        player_total: Player's hand total
        dealer_upcard: Dealer's upcard (2-11)
        true_count: Current true count

    Returns:
        The applicable IndexPlay if found and TC meets threshold, else None
    """
    for play in INDEX_PLAYS:
        if (
            play.player_total == player_total
            and play.dealer_upcard == dealer_upcard
            and play.should_deviate(true_count)
        ):
            return play

    return None
