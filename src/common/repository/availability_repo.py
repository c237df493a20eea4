from botocore.exceptions import ClientError
import logging
from datetime import date
from enum import Enum
from common.utils.custom_exceptions import NotFoundException
from common.utils.date_utils import to_date_key

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class DayRelease(str, Enum):
    RELEASED = "RELEASED"
    ALREADY_RELEASED = "ALREADY_RELEASED"
    MISSING = "MISSING"


class AvailabilityRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _key(room_id: str, day: date) -> dict:
        return {"pk": f"ROOM#{room_id}", "sk": f"AVAILABILITY#{to_date_key(day)}"}

    def release_booking_day(
        self, booking_id: str, room_id: str, day: date, count: int
    ) -> DayRelease:
        """Decrement one day's booked count and mark the day released on the booking.

        Both writes share a transaction; the booking-side condition makes a
        repeated call for the same day a no-op. Raises ``NotFoundException``
        when the booking item itself is gone.
        """
        day_key = to_date_key(day)
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Update": {
                            "TableName": self.table.name,
                            "Key": {"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"},
                            "UpdateExpression": "ADD #released :day_set",
                            "ConditionExpression": "attribute_exists(pk) AND NOT contains(#released, :day)",
                            "ReturnValuesOnConditionCheckFailure": "ALL_OLD",
                            "ExpressionAttributeNames": {"#released": "released_dates"},
                            "ExpressionAttributeValues": {
                                ":day_set": {day_key},
                                ":day": day_key,
                            },
                        }
                    },
                    {
                        "Update": {
                            "TableName": self.table.name,
                            "Key": self._key(room_id, day),
                            "UpdateExpression": "ADD #booked :delta",
                            "ConditionExpression": "attribute_exists(pk)",
                            "ExpressionAttributeNames": {"#booked": "booked_count"},
                            "ExpressionAttributeValues": {":delta": -count},
                        }
                    },
                ]
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") != "TransactionCanceledException":
                logger.error(
                    f"Error releasing {room_id} on {day_key} for booking {booking_id}: {err}"
                )
                raise
            cancellations = err.response.get("CancellationReasons", [])
            reasons = [reason.get("Code") for reason in cancellations]
            if reasons and reasons[0] == "ConditionalCheckFailed":
                if not cancellations[0].get("Item"):
                    logger.warning(f"Booking {booking_id} no longer exists, stopping release")
                    raise NotFoundException("booking", booking_id, 404)
                return DayRelease.ALREADY_RELEASED
            if len(reasons) > 1 and reasons[1] == "ConditionalCheckFailed":
                logger.warning(f"No availability entry for room {room_id} on {day_key}, skipping")
                return DayRelease.MISSING
            logger.error(
                f"Error releasing {room_id} on {day_key} for booking {booking_id}: {err}"
            )
            raise
        return DayRelease.RELEASED
