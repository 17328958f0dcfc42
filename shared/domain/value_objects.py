"""
Common Value Objects

Value objects used across the scheduling domain:
- DateRange: an inclusive range of calendar dates (generation requests)
- SlotState: the inventory state a slot should be synchronized to
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Optional

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Calendar date range value object

    Represents the range from start_date to end_date, BOTH inclusive.
    Slot generation requests are expressed this way: generating
    2024-06-03..2024-06-03 produces the slots of a single day.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ValueError(f"End date ({self.end_date}) must not be before start date ({self.start_date})")

    def days(self) -> Iterator[date]:
        """Iterate over every calendar date of the range in order"""
        current = self.start_date
        while True:
            yield current
            if current >= self.end_date:
                return
            current += timedelta(days=1)

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date <= self.end_date

    def __len__(self) -> int:
        """Number of calendar days covered by the range"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


@dataclass(frozen=True)
class SlotState(ValueObject):
    """
    Target inventory state of a slot

    Confirm synchronizes a slot to SlotState(is_booked=True, booking_id=<id>),
    Reject to SlotState.released().
    """
    is_booked: bool
    booking_id: Optional[int] = None

    def __post_init__(self):
        if self.is_booked and self.booking_id is None:
            raise ValueError("A booked slot must reference a booking")
        if not self.is_booked and self.booking_id is not None:
            raise ValueError("A released slot cannot reference a booking")

    @classmethod
    def booked_by(cls, booking_id: int) -> "SlotState":
        return cls(is_booked=True, booking_id=booking_id)

    @classmethod
    def released(cls) -> "SlotState":
        return cls(is_booked=False, booking_id=None)
