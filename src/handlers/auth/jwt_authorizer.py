import logging
import os
import jwt

from common.utils.constants import ADMIN_ROLES

logger = logging.getLogger(__name__)

JWT_SECRET = os.environ.get("JWT_SECRET")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")

if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is not set")


def _generate_policy(principal_id, effect, resource, context=None):
    auth_response = {
        "principalId": principal_id,
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Action": "execute-api:Invoke",
                    "Effect": effect,
                    "Resource": resource,
                }
            ],
        },
    }

    if context:
        auth_response["context"] = {k: str(v) for k, v in context.items()}

    return auth_response


def _get_stage_arn(method_arn: str) -> str:
    parts = method_arn.split("/")
    return "/".join(parts[:2]) + "/*/*"


def _extract_token(event) -> str:
    headers = event.get("headers") or {}
    token = (
        event.get("authorizationToken")
        or headers.get("Authorization")
        or headers.get("authorization")
    )
    if not token:
        raise jwt.InvalidTokenError("Missing Authorization header")
    return token.removeprefix("Bearer ")


def lambda_handler(event, context):
    try:
        decoded = jwt.decode(
            _extract_token(event),
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp"]},
        )

        user_id = decoded.get("user_id")
        if not user_id:
            raise jwt.InvalidTokenError("Missing user_id in token")

        role = str(decoded.get("role", "")).upper()
        if role not in ADMIN_ROLES:
            raise PermissionError(f"role {role or '<none>'} is not an admin role")

        return _generate_policy(
            principal_id=user_id,
            effect="Allow",
            resource=_get_stage_arn(event["methodArn"]),
            context={
                "user_id": user_id,
                "email": decoded.get("email", ""),
                "name": decoded.get("name", ""),
                "role": role,
            },
        )

    except jwt.ExpiredSignatureError:
        logger.warning("Authorization failed: token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Authorization failed: invalid token: {e}")
    except PermissionError as e:
        logger.warning(f"Authorization failed: {e}")

    return _generate_policy(
        principal_id="unauthorized",
        effect="Deny",
        resource=_get_stage_arn(event["methodArn"]),
    )
