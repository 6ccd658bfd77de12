"""
Single-guest operations for invitees (authenticated by invitation code)
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from rsvp.core.db import transaction
from rsvp.core.errors import AuthFailure, CapacityFailure, ProtectedGuest
from rsvp.core.locks import group_locks
from rsvp.models import Guest
from rsvp.services.access_service import AccessService
from rsvp.services.repositories import GroupRepo, GuestRepo
from rsvp.services.validation import normalize_guest_fields

logger = logging.getLogger(__name__)

class GuestService:
    """Create, read, update and delete one guest of the caller's own group"""

    @staticmethod
    def list_guests(db: Session, group_id: Any, invitation_code: Any) -> List[Guest]:
        group = AccessService.resolve_group(db, group_id, invitation_code)
        return GuestRepo.list_for_group(db, group.id)

    @staticmethod
    def create_guest(
        db: Session,
        group_id: Any,
        invitation_code: Any,
        name: Optional[str],
        attending_locations: Optional[List[str]],
        dietary_preferences: Any,
        age_category: Optional[str] = "adult"
    ) -> Guest:
        group_uuid = AccessService.resolve_group(db, group_id, invitation_code).id

        with group_locks.hold(group_uuid), transaction(db):
            # Count and insert under the group lock so two creates cannot both pass the check
            group = GroupRepo.lock(db, group_uuid)
            if group is None:
                raise AuthFailure()

            current_count = GuestRepo.count_for_group(db, group_uuid)
            if current_count >= group.party_size:
                raise CapacityFailure(
                    f"Maximum of {group.party_size} guests allowed for this group (currently {current_count})",
                    field="party_size"
                )

            normalized = normalize_guest_fields(
                name, attending_locations, dietary_preferences, age_category, group.locations
            )
            guest = Guest(
                guest_group_id=group_uuid,
                name=normalized.name,
                attending_locations=normalized.attending_locations,
                dietary_preferences=normalized.dietary_preferences,
                age_category=normalized.age_category,
                self_added=True
            )
            db.add(guest)

        db.refresh(guest)
        logger.info(f"Guest {guest.id} added to group {group_uuid}")
        return guest

    @staticmethod
    def update_guest(
        db: Session,
        guest_id: Any,
        group_id: Any,
        invitation_code: Any,
        name: Optional[str],
        attending_locations: Optional[List[str]],
        dietary_preferences: Any,
        age_category: Optional[str] = "adult"
    ) -> Guest:
        group_locations = AccessService.authenticate(db, group_id, invitation_code)
        guest = AccessService.check_membership(db, guest_id, group_id)

        normalized = normalize_guest_fields(
            name, attending_locations, dietary_preferences, age_category, group_locations
        )

        with transaction(db):
            guest.name = normalized.name
            guest.attending_locations = normalized.attending_locations
            guest.dietary_preferences = normalized.dietary_preferences
            guest.age_category = normalized.age_category

        db.refresh(guest)
        return guest

    @staticmethod
    def delete_guest(db: Session, guest_id: Any, group_id: Any, invitation_code: Any) -> bool:
        """Remove a self-added guest; guests entered by the organizers stay"""
        AccessService.authenticate(db, group_id, invitation_code)
        guest = AccessService.check_membership(db, guest_id, group_id)

        if not guest.self_added:
            raise ProtectedGuest()

        with transaction(db):
            db.delete(guest)

        logger.info(f"Guest {guest_id} removed from group {group_id}")
        return True
