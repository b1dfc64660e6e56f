"""Exceptions raised by the trainer engine."""


class TrainerError(Exception):
    """Base class for trainer errors."""


class InvalidBetError(TrainerError, ValueError):
    """A bet that is not a positive whole amount within the balance."""

    def __init__(self, amount: object, balance: int) -> None:
        self.amount = amount
        self.balance = balance
        super().__init__(f"Invalid bet amount {amount!r} (balance {balance})")


class EmptyShoeError(TrainerError, IndexError):
    """
    A card was requested from an exhausted shoe.

    The reshuffle reserve covers ordinary rounds; a long run of resplits and
    small cards can still exhaust it. The round cannot continue.
    """
