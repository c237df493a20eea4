from common.repository.room_repo import RoomRepository
from common.models.rooms import Room
from common.schemas.rooms import RoomRequest
from common.utils.custom_exceptions import NotFoundException
from typing import List
from uuid import uuid4


class RoomService:
    def __init__(self, room_repo: RoomRepository):
        self.room_repo = room_repo

    def add_room(self, req: RoomRequest) -> Room:
        room = Room(
            room_id=str(uuid4()),
            name=req.name,
            total_stock=req.total_stock,
            price=req.price,
            description=req.description,
            size=req.size,
            image=req.image,
            images=req.images,
            amenities=req.amenities,
        )
        self.room_repo.add_room(room=room)
        return room

    def get_room(self, room_id: str) -> Room:
        room = self.room_repo.get_room_by_id(room_id)
        if room is None:
            raise NotFoundException("room", room_id, 404)
        return room

    def list_rooms(self) -> List[Room]:
        return sorted(self.room_repo.list_rooms(), key=lambda r: r.name)
