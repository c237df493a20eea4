import os
from datetime import datetime, timedelta, timezone
import jwt

from common.models.users import User

SECRET_KEY = os.environ.get("JWT_SECRET")
ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
# one front-desk shift
STAFF_TOKEN_TTL = timedelta(minutes=int(os.environ.get("JWT_TTL_MINUTES", 60 * 12)))


def staff_claims(user: User, issued_at: datetime) -> dict:
    """Claims read back by the authorizer: ``user_id`` and ``role`` are required."""
    return {
        "user_id": user.user_id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "iat": issued_at,
        "exp": issued_at + STAFF_TOKEN_TTL,
    }


def create_staff_token(user: User) -> str:
    if not SECRET_KEY:
        raise RuntimeError("JWT_SECRET environment variable is not set")
    return jwt.encode(
        staff_claims(user, datetime.now(timezone.utc)), SECRET_KEY, algorithm=ALGORITHM
    )
