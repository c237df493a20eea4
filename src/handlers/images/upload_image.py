import logging
from pydantic import ValidationError

from common.schemas.images import ImageUploadRequest
from common.services.image_service import ImageService
from common.utils.authorization import require_admin
from common.utils.custom_exceptions import ImageUploadFailed
from common.utils.custom_response import send_custom_response

logger = logging.getLogger(__name__)

image_service = ImageService()


def upload_image(event, context):
    denied = require_admin(event)
    if denied:
        return denied

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = ImageUploadRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        url = image_service.upload(request_body.image, filename=request_body.filename)
    except ImageUploadFailed as err:
        return send_custom_response(502, f"Image upload failed: {err}")
    except Exception:
        logger.exception("Unhandled error uploading image")
        return send_custom_response(500, "Internal server error")

    return send_custom_response(201, "Image uploaded successfully", {"url": url})
