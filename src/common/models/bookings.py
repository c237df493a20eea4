from enum import Enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, List, Optional


class BookingStatus(str, Enum):
    PENDING = "pending"
    VERIFICATION_PENDING = "verification_pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


AWAITING_ACTION = frozenset({BookingStatus.PENDING, BookingStatus.VERIFICATION_PENDING})


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class RoomBookingStatus(str, Enum):
    BOOKED = "booked"
    AVAILABLE = "available"


def coerce_rooms_count(value: Any) -> int:
    """Rooms held by a booking; anything missing, non-numeric or below one counts as 1."""
    if isinstance(value, bool):
        return 1
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 1
    return count if count >= 1 else 1


@dataclass
class Guest:
    name: str
    email: str
    phone: Optional[str] = None


@dataclass
class BookedRoom:
    name: str
    room_id: Optional[str] = None
    image: Optional[str] = None
    base_price_per_night: Optional[float] = None
    status: Optional[str] = None


@dataclass
class Stay:
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    total_nights: int = 0
    adults: int = 1
    children: int = 0
    rooms_count: int = 1


@dataclass
class Payment:
    total_amount: float = 0.0
    status: str = PaymentStatus.UNPAID.value
    method: Optional[str] = None
    advance_amount: Optional[float] = None
    pending_amount: Optional[float] = None
    paid_amount: Optional[float] = None
    screenshot_url: Optional[str] = None


@dataclass
class Booking:
    id: str
    guest: Guest
    room: BookedRoom
    stay: Stay
    payment: Payment = field(default_factory=Payment)
    status: BookingStatus = BookingStatus.PENDING
    booking_id: Optional[str] = None

    version: int = 0
    released_dates: List[str] = field(default_factory=list)

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_id(self) -> str:
        return self.booking_id or self.id
