from typing import Optional
from common.utils.constants import ADMIN_ROLES
from common.utils.custom_response import send_custom_response


def require_admin(event) -> Optional[dict]:
    """Error response for callers without an admin role claim, else None."""
    try:
        role_raw = event["requestContext"]["authorizer"]["role"]
    except (KeyError, TypeError):
        return send_custom_response(401, "Unauthorized")

    if not role_raw or role_raw.upper() not in ADMIN_ROLES:
        return send_custom_response(403, "Forbidden")
    return None
