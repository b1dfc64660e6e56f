"""Player actions the advisor can recommend."""

from enum import Enum, auto


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()

    def __str__(self) -> str:
        return self.name.title()
