from typing import Literal, Optional
from pydantic import BaseModel, Field


class BookingActionRequest(BaseModel):
    confirm: bool = False
    expected_version: Optional[int] = Field(default=None, ge=0)


class BookingListQuery(BaseModel):
    status: Literal["all", "pending", "confirmed", "cancelled"] = "all"
    search: Optional[str] = Field(default=None, max_length=100)
