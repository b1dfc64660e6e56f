"""Count-based bet spread."""

import math


def recommended_bet(true_count: float, min_bet: int = 1, unit: int = 10) -> int:
    """
    Recommend a bet for the given true count.

    Bets the minimum at a true count of +1 or lower and adds one unit per
    whole point above that. The result is not limited by the balance.

    Args:
        true_count: Current (rounded) true count
        min_bet: Table minimum
        unit: Amount added per true count point above +1

    Returns:
        The recommended bet
    """
    if true_count <= 1:
        return min_bet
    return min_bet + math.floor(true_count - 1) * unit
