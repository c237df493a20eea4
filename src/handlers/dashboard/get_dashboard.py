import logging
import os
from boto3 import resource

from common.repository.booking_repo import BookingRepository
from common.repository.room_repo import RoomRepository
from common.services.inventory_service import InventoryService
from common.utils.authorization import require_admin
from common.utils.constants import AWS_REGION
from common.utils.custom_response import send_custom_response, to_payload

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

inventory_service = InventoryService(
    booking_repo=BookingRepository(table),
    room_repo=RoomRepository(table),
)


def get_dashboard(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    try:
        stats = inventory_service.dashboard_stats()
    except Exception:
        logger.exception("Unhandled error building dashboard")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(
        200,
        "Dashboard retrieved successfully",
        {key: to_payload(value) for key, value in stats.items()},
    )


def get_availability_today(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    try:
        availability = inventory_service.available_today()
    except Exception:
        logger.exception("Unhandled error computing availability")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(
        200, "Availability retrieved successfully", to_payload(availability)
    )
