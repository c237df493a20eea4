from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class ReleaseResult:
    room_id: Optional[str] = None
    released: List[date] = field(default_factory=list)
    already_released: List[date] = field(default_factory=list)
    missing: List[date] = field(default_factory=list)
