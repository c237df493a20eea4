import logging
import os
from common.repository.user_repo import UserRepository
from common.services.user_service import UserService
from common.schemas.users import LoginRequest
from common.utils.constants import AWS_REGION
from common.utils.custom_exceptions import IncorrectCredentials
from common.utils.custom_response import send_custom_response
from pydantic import ValidationError
from botocore.exceptions import ClientError
from boto3 import resource

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)
repo = UserRepository(table=table)
service = UserService(user_repo=repo)


def login_handler(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")
    try:
        request_body = LoginRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)
    try:
        token = service.login(request_body.email, request_body.password)
        return send_custom_response(status_code=200, message="login successful", data=token)
    except IncorrectCredentials as e:
        return send_custom_response(status_code=401, message=str(e))
    except ClientError as e:
        logger.error(f"AWS client error during login: {e}")
        return send_custom_response(status_code=500, message="Internal server error")
    except Exception:
        logger.exception("Unhandled error during login")
        return send_custom_response(status_code=500, message="Internal server error")
