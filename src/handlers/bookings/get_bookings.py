import logging
import os
from boto3 import resource
from pydantic import ValidationError

from common.repository.availability_repo import AvailabilityRepository
from common.repository.booking_repo import BookingRepository
from common.repository.room_repo import RoomRepository
from common.schemas.bookings import BookingListQuery
from common.services.booking_service import BookingService
from common.utils.authorization import require_admin
from common.utils.constants import AWS_REGION
from common.utils.custom_exceptions import NotFoundException
from common.utils.custom_response import send_custom_response, to_payload

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

booking_service = BookingService(
    booking_repo=BookingRepository(table),
    room_repo=RoomRepository(table),
    availability_repo=AvailabilityRepository(table),
)


def get_bookings(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    try:
        query = BookingListQuery.model_validate(event.get("queryStringParameters") or {})
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        bookings = booking_service.list_bookings(status=query.status, search=query.search)
    except Exception:
        logger.exception("Unhandled error listing bookings")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(
        200,
        "Bookings retrieved successfully",
        {"count": len(bookings), "bookings": to_payload(bookings)},
    )


def get_booking(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    booking_id = (event.get("pathParameters") or {}).get("booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")

    try:
        booking = booking_service.get_booking(booking_id)
    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except Exception:
        logger.exception(f"Unhandled error retrieving booking {booking_id}")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(200, "Booking retrieved successfully", to_payload(booking))
