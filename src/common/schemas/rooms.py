from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from common.utils.constants import DEFAULT_TOTAL_STOCK


class RoomRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0)
    description: str = ""
    size: Optional[str] = None
    total_stock: int = Field(default=DEFAULT_TOTAL_STOCK, ge=1)
    image: Optional[str] = None
    images: List[str] = []
    amenities: List[str] = []

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v
