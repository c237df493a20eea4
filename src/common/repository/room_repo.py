from botocore.exceptions import ClientError
import logging
from typing import Optional, List
from boto3.dynamodb.conditions import Attr, Key
from decimal import Decimal
from common.models.rooms import Room
from common.utils.constants import DEFAULT_TOTAL_STOCK

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class RoomRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    def add_room(self, room: Room):
        room_item = {
            "pk": f"ROOM#{room.room_id}",
            "sk": "DETAILS",
            "name": room.name,
            "total_stock": room.total_stock,
            "price": Decimal(str(room.price)),
            "description": room.description,
            "images": room.images,
            "amenities": room.amenities,
        }
        if room.size:
            room_item["size"] = room.size
        if room.image:
            room_item["image"] = room.image
        name_item = {
            "pk": f"ROOMNAME#{room.name}",
            "sk": f"ROOM#{room.room_id}",
        }
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": room_item,
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": name_item,
                        }
                    },
                ]
            )
        except ClientError as err:
            logger.error(f"Error creating room {room.room_id}: {err}")
            raise

    def get_room_by_id(self, room_id: str) -> Optional[Room]:
        try:
            response = self.table.get_item(
                Key={"pk": f"ROOM#{room_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving room by id {room_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def find_room_ids_by_name(self, name: str) -> List[str]:
        try:
            response = self.table.query(
                KeyConditionExpression=(
                    Key("pk").eq(f"ROOMNAME#{name}") & Key("sk").begins_with("ROOM#")
                )
            )
        except ClientError as err:
            logger.error(f"Error retrieving rooms named {name}: {err}")
            raise
        return [item["sk"].split("ROOM#", 1)[1] for item in response.get("Items", [])]

    def list_rooms(self) -> List[Room]:
        scan_filter = Attr("pk").begins_with("ROOM#") & Attr("sk").eq("DETAILS")
        rooms = []
        try:
            resp = self.table.scan(FilterExpression=scan_filter)
            rooms.extend(self._to_domain(item) for item in resp.get("Items", []))
            while "LastEvaluatedKey" in resp:
                resp = self.table.scan(
                    FilterExpression=scan_filter,
                    ExclusiveStartKey=resp["LastEvaluatedKey"],
                )
                rooms.extend(self._to_domain(item) for item in resp.get("Items", []))
        except ClientError as err:
            logger.error(f"Error listing rooms: {err}")
            raise
        return rooms

    @staticmethod
    def _to_domain(item: dict) -> Room:
        # an unset or zero stock falls back to the default capacity
        total_stock = int(item.get("total_stock") or DEFAULT_TOTAL_STOCK)
        return Room(
            room_id=item["pk"].split("ROOM#", 1)[1],
            name=item.get("name", ""),
            total_stock=total_stock,
            price=float(item.get("price", 0)),
            description=item.get("description", ""),
            size=item.get("size"),
            image=item.get("image"),
            images=list(item.get("images", [])),
            amenities=list(item.get("amenities", [])),
        )
