from botocore.exceptions import ClientError
import logging
from typing import Optional
from boto3.dynamodb.conditions import Key
from common.models.users import User, UserRole

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
else:
    Table = object

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, table: Table):
        self.table = table

    def get_by_mail(self, mail: str) -> Optional[User]:
        try:
            response = self.table.query(
                KeyConditionExpression=(
                    Key("pk").eq(f"EMAIL#{mail}") & Key("sk").begins_with("USER#")
                )
            )
        except ClientError as err:
            logger.error(f"Error retrieving user by mail {mail}: {err}")
            raise

        items = response.get("Items", [])
        if not items:
            return None

        user_id = items[0]["sk"].split("#", 1)[1]
        return self.get_by_id(user_id=user_id)

    def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            response = self.table.get_item(
                Key={"pk": f"USER#{user_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving user by id {user_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None

        return self._to_domain(item=item)

    @staticmethod
    def _to_domain(item: dict) -> User:
        return User(
            user_id=item["pk"].split("#", 1)[1],
            name=item.get("name", ""),
            email=item["email"],
            role=UserRole(item["role"]),
            password=item["password"],
        )
