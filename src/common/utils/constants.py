import os

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", "ap-south-1")

ADMIN_ROLES = frozenset(
    role.strip().upper()
    for role in os.environ.get("ADMIN_ROLES", "ADMIN").split(",")
    if role.strip()
)

IMGBB_API_KEY = os.environ.get("IMGBB_API_KEY")
IMGBB_UPLOAD_URL = os.environ.get("IMGBB_UPLOAD_URL", "https://api.imgbb.com/1/upload")
IMGBB_TIMEOUT_SECONDS = 30

# IANA zone used to decide what "today" is; unset means the process local time
HOTEL_TIMEZONE = os.environ.get("HOTEL_TIMEZONE")

DEFAULT_TOTAL_STOCK = 5
RECENT_BOOKINGS_LIMIT = 5
DATE_FORMAT = "%Y-%m-%d"
