import logging
import os
from boto3 import resource

from common.repository.room_repo import RoomRepository
from common.services.room_service import RoomService
from common.utils.authorization import require_admin
from common.utils.constants import AWS_REGION
from common.utils.custom_exceptions import NotFoundException
from common.utils.custom_response import send_custom_response, to_payload

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

room_repo = RoomRepository(table)
room_service = RoomService(room_repo=room_repo)


def get_rooms(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    room_id = (event.get("pathParameters") or {}).get("room_id")
    try:
        if room_id:
            room = room_service.get_room(room_id)
            return send_custom_response(200, "Room retrieved successfully", to_payload(room))

        rooms = room_service.list_rooms()
    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except Exception:
        logger.exception("Unhandled error retrieving rooms")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(
        200,
        "Rooms retrieved successfully",
        {"count": len(rooms), "rooms": to_payload(rooms)},
    )
