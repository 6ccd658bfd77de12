"""
Invitee-side group operations: party size and notes
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from rsvp.core.db import transaction
from rsvp.core.errors import CapacityFailure
from rsvp.models import GuestGroup
from rsvp.schemas.group import GuestGroupPublic
from rsvp.services.access_service import AccessService
from rsvp.services.repositories import GuestRepo
from rsvp.services.validation import validate_notes, validate_party_size

logger = logging.getLogger(__name__)

class GroupService:
    """Service for the fields an invitee may change on their own group"""

    @staticmethod
    def public_projection(group: GuestGroup) -> GuestGroupPublic:
        """Group as shown to invitees (never includes the invitation code)"""
        return GuestGroupPublic.model_validate(group)

    @staticmethod
    def set_party_size(
        db: Session,
        group_id: Any,
        invitation_code: Any,
        new_size: Optional[int]
    ) -> GuestGroupPublic:
        group = AccessService.resolve_group(db, group_id, invitation_code)
        validate_party_size(new_size)

        current_guests = GuestRepo.count_for_group(db, group.id)
        if new_size < current_guests:
            raise CapacityFailure(
                f"Cannot set party size to {new_size}: the group already has {current_guests} guests",
                field="party_size"
            )

        with transaction(db):
            group.party_size = new_size

        db.refresh(group)
        logger.info(f"Party size for group {group.id} set to {new_size}")
        return GroupService.public_projection(group)

    @staticmethod
    def set_notes(
        db: Session,
        group_id: Any,
        invitation_code: Any,
        notes: Optional[str]
    ) -> GuestGroupPublic:
        group = AccessService.resolve_group(db, group_id, invitation_code)
        validate_notes(notes)

        with transaction(db):
            group.additional_notes = notes

        db.refresh(group)
        return GroupService.public_projection(group)
