from dataclasses import dataclass, field
from typing import List, Optional
from common.utils.constants import DEFAULT_TOTAL_STOCK


@dataclass
class Room:
    room_id: str
    name: str
    total_stock: int = DEFAULT_TOTAL_STOCK
    price: float = 0.0
    description: str = ""
    size: Optional[str] = None
    image: Optional[str] = None
    images: List[str] = field(default_factory=list)
    amenities: List[str] = field(default_factory=list)


@dataclass
class RoomAvailability:
    room_id: str
    name: str
    total: int
    available: int
