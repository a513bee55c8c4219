"""
Venue blocks: stage, bar, dance floor and other non-seating floor plan elements
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.models import VenueBlock
from app.schemas.venue import (
    VenueBlockCreate,
    VenueBlockPositionUpdate,
    VenueBlockRotationUpdate,
    VenueBlockSizeUpdate,
    VenueBlockUpdate,
)
from app.services.repositories import EventRepo, VenueBlockRepo

logger = logging.getLogger(__name__)

class VenueService:
    """Service for venue block operations"""

    @staticmethod
    def create_block(event_id: int, data: VenueBlockCreate, db: Session) -> VenueBlock:
        EventRepo.require(db, event_id)
        block = VenueBlock(event_id=event_id, **data.model_dump(mode="json"))
        db.add(block)
        db.commit()
        db.refresh(block)
        logger.info("Venue block %s (%s) added to event %s", block.id, block.type, event_id)
        return block

    @staticmethod
    def update_block(block_id: int, data: VenueBlockUpdate, db: Session) -> VenueBlock:
        block = VenueBlockRepo.require(db, block_id)
        for name, value in data.model_dump(exclude_unset=True, exclude_none=True, mode="json").items():
            setattr(block, name, value)
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def update_block_position(block_id: int, data: VenueBlockPositionUpdate, db: Session) -> VenueBlock:
        block = VenueBlockRepo.require(db, block_id)
        block.position_x = data.position_x
        block.position_y = data.position_y
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def update_block_size(block_id: int, data: VenueBlockSizeUpdate, db: Session) -> VenueBlock:
        block = VenueBlockRepo.require(db, block_id)
        block.width = data.width
        block.height = data.height
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def update_block_rotation(block_id: int, data: VenueBlockRotationUpdate, db: Session) -> VenueBlock:
        block = VenueBlockRepo.require(db, block_id)
        block.rotation = data.rotation % 360
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def delete_block(block_id: int, db: Session) -> None:
        block = VenueBlockRepo.require(db, block_id)
        db.delete(block)
        db.commit()

    @staticmethod
    def get_event_blocks(event_id: int, db: Session) -> List[VenueBlock]:
        EventRepo.require(db, event_id)
        return VenueBlockRepo.list_for_event(db, event_id)
