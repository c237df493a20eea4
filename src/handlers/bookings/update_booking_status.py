import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.availability_repo import AvailabilityRepository
from common.repository.booking_repo import BookingRepository
from common.repository.room_repo import RoomRepository
from common.schemas.bookings import BookingActionRequest
from common.services.booking_service import BookingService
from common.utils.authorization import require_admin
from common.utils.constants import AWS_REGION
from common.utils.custom_exceptions import (
    BookingConflict,
    InvalidTransition,
    InventoryReleaseFailed,
    NotFoundException,
)
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

ACTIONS = {
    "verify": "verify_payment",
    "reject": "reject_payment",
    "cancel": "cancel",
    "reconfirm": "reconfirm",
}


def update_booking_status(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    path_params = event.get("pathParameters") or {}
    booking_id = path_params.get("booking_id")
    action = path_params.get("action")

    if not booking_id:
        return send_custom_response(400, "booking_id is required in the path")
    if action not in ACTIONS:
        return send_custom_response(
            400, f"Invalid action. Allowed: {', '.join(ACTIONS)}"
        )

    try:
        request_body = BookingActionRequest.model_validate_json(event.get("body") or "{}")
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    if not request_body.confirm:
        return send_custom_response(
            400, f"Confirmation required: resend with confirm=true to {action} this booking"
        )

    try:
        booking = getattr(booking_service, ACTIONS[action])(
            booking_id, expected_version=request_body.expected_version
        )
    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except InvalidTransition as err:
        return send_custom_response(400, str(err))
    except BookingConflict as err:
        return send_custom_response(409, str(err))
    except InventoryReleaseFailed as err:
        return send_custom_response(500, str(err), {"booking_id": err.booking_id})
    except ClientError as err:
        logger.error(f"AWS client error on {action} {booking_id}: {err}")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception(f"Unhandled error on {action} {booking_id}")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(
        200, f"Booking {action} successful", to_payload(booking)
    )
