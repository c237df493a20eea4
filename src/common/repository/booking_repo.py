from botocore.exceptions import ClientError
import logging
from typing import Any, Dict, Iterable, List, Optional
from boto3.dynamodb.conditions import Attr
from common.models.bookings import (
    Booking,
    BookingStatus,
    BookedRoom,
    Guest,
    Payment,
    Stay,
    coerce_rooms_count,
)
from common.utils.custom_exceptions import BookingConflict
from common.utils.date_utils import parse_calendar_date
from decimal import Decimal
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


def _number(value: Any, default=None):
    if value is None:
        return default
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _timestamp(value: Optional[str]) -> datetime:
    if not value:
        return datetime.fromtimestamp(0, timezone.utc)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _calendar_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_calendar_date(value)


def _is_missing_document_path(err: ClientError) -> bool:
    error = err.response.get("Error", {})
    return (
        error.get("Code") == "ValidationException"
        and "document path" in error.get("Message", "")
    )


class BookingRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _key(booking_id: str) -> Dict[str, str]:
        return {"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(Key=self._key(booking_id))
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)


    def list_bookings(self) -> List[Booking]:
        scan_filter = Attr("pk").begins_with("BOOKING#") & Attr("sk").eq("DETAILS")
        bookings = []
        try:
            resp = self.table.scan(FilterExpression=scan_filter)
            bookings.extend(self._readable(resp.get("Items", [])))
            while "LastEvaluatedKey" in resp:
                resp = self.table.scan(
                    FilterExpression=scan_filter,
                    ExclusiveStartKey=resp["LastEvaluatedKey"],
                )
                bookings.extend(self._readable(resp.get("Items", [])))
        except ClientError as err:
            logger.error(f"Error listing bookings: {err}")
            raise
        return bookings

    def _readable(self, items: List[dict]) -> List[Booking]:
        """Map scanned items, leaving out the ones that cannot be read."""
        bookings = []
        for item in items:
            try:
                bookings.append(self._to_domain(item))
            except ValueError as err:
                logger.warning(f"Skipping unreadable booking {item.get('pk')}: {err}")
        return bookings

    def update_booking_fields(
        self,
        booking_id: str,
        changes: Dict[str, str],
        allowed_statuses: Iterable[BookingStatus],
        expected_version: Optional[int] = None,
    ) -> int:
        """Apply ``changes`` (dotted attribute paths) in one conditional write.

        The write only lands while the stored status is one of
        ``allowed_statuses`` and, if given, the stored version matches
        ``expected_version``. Returns the new version.

        A nested path whose parent map is absent on the stored item gets an
        empty parent map first, then the write is retried once.
        """
        names = {"#version": "version", "#booking_status": "booking_status"}
        values: Dict[str, Any] = {":zero": 0, ":one": 1}
        assignments = []
        for i, (path, value) in enumerate(changes.items()):
            placeholders = []
            for part in path.split("."):
                placeholder = f"#{part}"
                names[placeholder] = part
                placeholders.append(placeholder)
            values[f":v{i}"] = value
            assignments.append(f"{'.'.join(placeholders)} = :v{i}")
        assignments.append("#version = if_not_exists(#version, :zero) + :one")

        allowed = []
        for i, status in enumerate(allowed_statuses):
            values[f":s{i}"] = status.value
            allowed.append(f":s{i}")
        condition = f"attribute_exists(pk) AND #booking_status IN ({', '.join(allowed)})"
        if expected_version is not None:
            values[":expected"] = expected_version
            if expected_version == 0:
                condition += " AND (attribute_not_exists(#version) OR #version = :expected)"
            else:
                condition += " AND #version = :expected"

        request = dict(
            Key=self._key(booking_id),
            UpdateExpression="SET " + ", ".join(assignments),
            ConditionExpression=condition,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ReturnValues="UPDATED_NEW",
        )
        try:
            try:
                response = self.table.update_item(**request)
            except ClientError as err:
                parents = sorted({path.split(".")[0] for path in changes if "." in path})
                if not parents or not _is_missing_document_path(err):
                    raise
                logger.warning(f"Booking {booking_id} lacks one of {parents}, creating empty maps")
                self._ensure_maps(booking_id, parents)
                response = self.table.update_item(**request)
        except ClientError as err:
            if (
                err.response.get("Error", {}).get("Code")
                == "ConditionalCheckFailedException"
            ):
                raise BookingConflict(booking_id)
            logger.error(f"Error updating booking {booking_id}: {err}")
            raise
        return _number(response.get("Attributes", {}).get("version"), 0)

    def _ensure_maps(self, booking_id: str, attributes: List[str]):
        names = {}
        assignments = []
        for attribute in attributes:
            names[f"#{attribute}"] = attribute
            assignments.append(f"#{attribute} = if_not_exists(#{attribute}, :empty)")
        self.table.update_item(
            Key=self._key(booking_id),
            UpdateExpression="SET " + ", ".join(assignments),
            ConditionExpression="attribute_exists(pk)",
            ExpressionAttributeNames=names,
            ExpressionAttributeValues={":empty": {}},
        )

    @staticmethod
    def _to_domain(item: dict) -> Booking:
        """Raises ``ValueError`` for an unknown status or a malformed stay date."""
        guest = item.get("guest") or {}
        room = item.get("room") or {}
        stay = item.get("stay") or {}
        payment = item.get("payment") or {}
        created_at = item.get("created_at")

        return Booking(
            id=item["pk"].removeprefix("BOOKING#"),
            booking_id=item.get("booking_id"),
            guest=Guest(
                name=guest.get("name", ""),
                email=guest.get("email", ""),
                phone=guest.get("phone"),
            ),
            room=BookedRoom(
                name=room.get("name", ""),
                room_id=room.get("room_id"),
                image=room.get("image"),
                base_price_per_night=_number(room.get("base_price_per_night")),
                status=room.get("status"),
            ),
            stay=Stay(
                check_in=_calendar_date(stay.get("check_in")),
                check_out=_calendar_date(stay.get("check_out")),
                total_nights=_number(stay.get("total_nights"), 0),
                adults=_number(stay.get("adults"), 1),
                children=_number(stay.get("children"), 0),
                rooms_count=coerce_rooms_count(_number(stay.get("rooms_count"))),
            ),
            payment=Payment(
                total_amount=_number(payment.get("total_amount"), 0),
                status=payment.get("status", "unpaid"),
                method=payment.get("method"),
                advance_amount=_number(payment.get("advance_amount")),
                pending_amount=_number(payment.get("pending_amount")),
                paid_amount=_number(payment.get("paid_amount")),
                screenshot_url=payment.get("screenshot_url"),
            ),
            status=BookingStatus(item.get("booking_status", BookingStatus.PENDING.value)),
            version=_number(item.get("version"), 0),
            released_dates=sorted(item.get("released_dates", set())),
            created_at=_timestamp(created_at),
        )
