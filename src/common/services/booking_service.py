import logging
from typing import Dict, List, Optional

from common.models.availability import ReleaseResult
from common.models.bookings import (
    AWAITING_ACTION,
    Booking,
    BookingStatus,
    PaymentStatus,
    RoomBookingStatus,
    coerce_rooms_count,
)
from common.repository.availability_repo import AvailabilityRepository, DayRelease
from common.repository.booking_repo import BookingRepository
from common.repository.room_repo import RoomRepository
from common.utils.custom_exceptions import (
    InvalidTransition,
    InventoryReleaseFailed,
    NotFoundException,
)
from common.utils.date_utils import iter_stay_dates

logger = logging.getLogger(__name__)

STATUS_FILTERS = {"all", "pending", "confirmed", "cancelled"}


class BookingService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        room_repo: RoomRepository,
        availability_repo: AvailabilityRepository,
    ):
        self.booking_repo = booking_repo
        self.room_repo = room_repo
        self.availability_repo = availability_repo

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id, 404)
        return booking

    def list_bookings(
        self, status: str = "all", search: Optional[str] = None
    ) -> List[Booking]:
        if status not in STATUS_FILTERS:
            raise ValueError(f"Invalid status filter. Allowed: {sorted(STATUS_FILTERS)}")

        bookings = sorted(
            self.booking_repo.list_bookings(),
            key=lambda b: b.created_at,
            reverse=True,
        )
        if status == "pending":
            bookings = [b for b in bookings if b.status in AWAITING_ACTION]
        elif status != "all":
            bookings = [b for b in bookings if b.status.value == status]

        if search:
            needle = search.lower()
            bookings = [
                b
                for b in bookings
                if needle in b.display_id.lower() or needle in b.guest.name.lower()
            ]
        return bookings

    def verify_payment(self, booking_id: str, expected_version: Optional[int] = None) -> Booking:
        return self._transition(
            booking_id,
            action="verify",
            allowed=AWAITING_ACTION,
            target=BookingStatus.CONFIRMED,
            changes={
                "payment.status": PaymentStatus.VERIFIED.value,
                "room.status": RoomBookingStatus.BOOKED.value,
            },
            expected_version=expected_version,
        )

    def reject_payment(self, booking_id: str, expected_version: Optional[int] = None) -> Booking:
        return self._transition(
            booking_id,
            action="reject",
            allowed=AWAITING_ACTION,
            target=BookingStatus.CANCELLED,
            changes={
                "payment.status": PaymentStatus.REJECTED.value,
                "room.status": RoomBookingStatus.AVAILABLE.value,
            },
            expected_version=expected_version,
            release=True,
        )

    def cancel(self, booking_id: str, expected_version: Optional[int] = None) -> Booking:
        return self._transition(
            booking_id,
            action="cancel",
            allowed=frozenset({BookingStatus.CONFIRMED}),
            target=BookingStatus.CANCELLED,
            changes={"room.status": RoomBookingStatus.AVAILABLE.value},
            expected_version=expected_version,
            release=True,
        )

    def reconfirm(self, booking_id: str, expected_version: Optional[int] = None) -> Booking:
        # inventory stays released; see DESIGN.md
        return self._transition(
            booking_id,
            action="reconfirm",
            allowed=frozenset({BookingStatus.CANCELLED}),
            target=BookingStatus.CONFIRMED,
            changes={
                "payment.status": PaymentStatus.VERIFIED.value,
                "room.status": RoomBookingStatus.BOOKED.value,
            },
            expected_version=expected_version,
        )

    def _transition(
        self,
        booking_id: str,
        action: str,
        allowed: frozenset,
        target: BookingStatus,
        changes: Dict[str, str],
        expected_version: Optional[int] = None,
        release: bool = False,
    ) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.status not in allowed:
            raise InvalidTransition(booking_id, booking.status.value, action)

        booking.version = self.booking_repo.update_booking_fields(
            booking_id,
            {"booking_status": target.value, **changes},
            allowed_statuses=allowed,
            expected_version=expected_version,
        )
        booking.status = target
        if "payment.status" in changes:
            booking.payment.status = changes["payment.status"]
        booking.room.status = changes["room.status"]
        logger.info(f"Booking {booking_id} moved to {target.value} by {action}")

        if release:
            try:
                self.release_inventory(booking)
            except Exception as err:
                logger.error(f"Booking {booking_id} is {target.value} but its inventory was not released: {err}")
                raise InventoryReleaseFailed(booking_id, err) from err
        return booking

    def resolve_room_id(self, booking: Booking) -> Optional[str]:
        if booking.room.room_id:
            return booking.room.room_id
        if not booking.room.name:
            return None
        room_ids = self.room_repo.find_room_ids_by_name(booking.room.name)
        if not room_ids:
            return None
        if len(room_ids) > 1:
            logger.warning(f"Room name {booking.room.name} matches {len(room_ids)} rooms, using {room_ids[0]}")
        return room_ids[0]

    def release_inventory(self, booking: Booking) -> ReleaseResult:
        """Give back the booking's rooms for every night of its stay.

        Best effort: unknown rooms and missing ledger days are logged and
        skipped, and an interruption part-way leaves the earlier nights
        released. Nights already released for this booking are not touched
        again.
        """
        result = ReleaseResult()
        if not booking.stay.check_in or not booking.stay.check_out:
            logger.warning(f"Booking {booking.id} has no stay dates, nothing to release")
            return result

        room_id = self.resolve_room_id(booking)
        if room_id is None:
            logger.warning(f"Room not found for booking {booking.id} ({booking.room.name}), skipping release")
            return result
        result.room_id = room_id

        count = coerce_rooms_count(booking.stay.rooms_count)
        for day in iter_stay_dates(booking.stay.check_in, booking.stay.check_out):
            outcome = self.availability_repo.release_booking_day(
                booking.id, room_id, day, count
            )
            if outcome == DayRelease.RELEASED:
                result.released.append(day)
            elif outcome == DayRelease.ALREADY_RELEASED:
                result.already_released.append(day)
            else:
                result.missing.append(day)

        logger.info(
            f"Released {count} x {room_id} for booking {booking.id}: "
            f"{len(result.released)} released, {len(result.already_released)} already released, "
            f"{len(result.missing)} missing"
        )
        return result
