"""Building and room registry operations."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.building import Building
from src.models.room import Room
from src.services.credentials import generate_building_code
from src.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class BuildingService:
    """Service for building and room database operations."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def create_building(
        self,
        name: str,
        address: str | None = None,
        description: str | None = None,
    ) -> Building:
        """Create a building with a code derived from its name.

        Raises:
            ValidationError: If name is empty
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Building name is required.")

        building = Building(
            name=name,
            code=generate_building_code(name),
            address=(address or "").strip() or None,
            description=(description or "").strip() or None,
        )
        self.db.add(building)
        self.db.commit()
        self.db.refresh(building)
        logger.info(f"Created building: {building.name} (ID={building.id}, code={building.code})")
        return building

    def list_buildings(self) -> list[Building]:
        return self.db.query(Building).order_by(Building.name.asc()).all()

    def get_building(self, building_id: int) -> Building:
        """Get building by ID.

        Raises:
            NotFoundError: If building does not exist
        """
        building = self.db.get(Building, building_id)
        if not building:
            raise NotFoundError("Building not found.")
        return building

    def add_room(self, building_id: int, room_number: str) -> Room:
        """Add a vacant room to a building.

        Raises:
            NotFoundError: If building does not exist
            ValidationError: If room number is empty
            ConflictError: If the building already has this room number
        """
        building = self.get_building(building_id)
        room_number = (room_number or "").strip()
        if not room_number:
            raise ValidationError("Room number is required.")

        existing = (
            self.db.query(Room)
            .filter(Room.building_id == building.id, Room.room_number == room_number)
            .first()
        )
        if existing:
            logger.warning(f"Duplicate room '{room_number}' in building {building.id}")
            raise ConflictError(f"Room number '{room_number}' already exists in this building.")

        room = Room(building_id=building.id, room_number=room_number, is_occupied=False)
        self.db.add(room)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(
                f"Room number '{room_number}' already exists in this building."
            ) from e
        self.db.refresh(room)
        logger.info(f"Added room {room_number} to building {building.id} (room ID={room.id})")
        return room

    def list_rooms(self, building_id: int, vacant_only: bool = False) -> list[Room]:
        query = self.db.query(Room).filter(Room.building_id == building_id)
        if vacant_only:
            query = query.filter(Room.is_occupied == False)  # noqa: E712
        return query.order_by(Room.room_number.asc()).all()

    def get_room(self, room_id: int) -> Room:
        room = self.db.get(Room, room_id)
        if not room:
            raise NotFoundError("Room not found.")
        return room


__all__ = ["BuildingService"]
