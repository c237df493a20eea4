from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from common.models.bookings import Booking, BookingStatus, PaymentStatus, coerce_rooms_count
from common.models.rooms import Room, RoomAvailability
from common.repository.booking_repo import BookingRepository
from common.repository.room_repo import RoomRepository
from common.utils.constants import RECENT_BOOKINGS_LIMIT
from common.utils.date_utils import local_today

REVENUE_PAYMENT_STATUSES = {PaymentStatus.PAID.value, PaymentStatus.VERIFIED.value}


def booked_counts_on(bookings: Iterable[Booking], day: date) -> Dict[str, int]:
    """Rooms held per room name on ``day`` by bookings that are not cancelled."""
    counts: Dict[str, int] = defaultdict(int)
    for booking in bookings:
        if booking.status == BookingStatus.CANCELLED:
            continue
        if not booking.room.name or not booking.stay.check_in or not booking.stay.check_out:
            continue
        if booking.stay.check_in <= day < booking.stay.check_out:
            counts[booking.room.name] += coerce_rooms_count(booking.stay.rooms_count)
    return dict(counts)


def compute_availability(
    bookings: Iterable[Booking], rooms: Iterable[Room], day: date
) -> List[RoomAvailability]:
    counts = booked_counts_on(bookings, day)
    return [
        RoomAvailability(
            room_id=room.room_id,
            name=room.name,
            total=room.total_stock,
            available=max(0, room.total_stock - counts.get(room.name, 0)),
        )
        for room in rooms
    ]


class InventoryService:
    def __init__(self, booking_repo: BookingRepository, room_repo: RoomRepository):
        self.booking_repo = booking_repo
        self.room_repo = room_repo

    def available_today(self, today: Optional[date] = None) -> List[RoomAvailability]:
        return compute_availability(
            self.booking_repo.list_bookings(),
            self.room_repo.list_rooms(),
            today or local_today(),
        )

    def dashboard_stats(self, today: Optional[date] = None) -> dict:
        bookings = self.booking_repo.list_bookings()
        rooms = self.room_repo.list_rooms()

        total_revenue = sum(
            b.payment.total_amount or 0
            for b in bookings
            if b.status != BookingStatus.CANCELLED
            and b.payment.status in REVENUE_PAYMENT_STATUSES
        )
        recent = sorted(bookings, key=lambda b: b.created_at, reverse=True)

        return {
            "total_bookings": len(bookings),
            "total_revenue": total_revenue,
            "total_rooms": len(rooms),
            "recent_bookings": recent[:RECENT_BOOKINGS_LIMIT],
            "room_availability": compute_availability(
                bookings, rooms, today or local_today()
            ),
        }
