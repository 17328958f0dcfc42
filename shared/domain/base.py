"""
Base Domain Classes

Value objects are the only domain building block the scheduling apps need:
slot drafts, date ranges and slot target states are all immutable and
compared by value.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass
