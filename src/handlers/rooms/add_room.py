import logging
import os
from boto3 import resource
from botocore.exceptions import ClientError
from pydantic import ValidationError

from common.repository.room_repo import RoomRepository
from common.schemas.rooms import RoomRequest
from common.services.room_service import RoomService
from common.utils.authorization import require_admin
from common.utils.constants import AWS_REGION
from common.utils.custom_response import send_custom_response, to_payload

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

room_repo = RoomRepository(table)
room_service = RoomService(room_repo=room_repo)


def add_room(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = RoomRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        room = room_service.add_room(request_body)
    except ClientError as err:
        logger.error(f"AWS client error adding room {request_body.name}: {err}")
        return send_custom_response(500, "Internal server error")
    except Exception:
        logger.exception(f"Unhandled error adding room {request_body.name}")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(201, f"Room {room.name} added successfully", to_payload(room))
