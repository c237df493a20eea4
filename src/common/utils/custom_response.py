from dataclasses import asdict, is_dataclass
from pydantic import BaseModel
from typing import Any, Generic, TypeVar, Optional

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    status_code: int
    message: str
    data: Optional[T] = None


def send_custom_response(status_code: int, message: str, data: Optional[Any] = None):
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
        },
        "body": APIResponse[Any](
            status_code=status_code, message=message, data=data
        ).model_dump_json(),
    }


def to_payload(obj: Any) -> Any:
    """Plain JSON-ready structures for dataclass models and lists of them."""
    if isinstance(obj, list):
        return [to_payload(o) for o in obj]
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj
