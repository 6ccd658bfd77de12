"""
Per-location attendance for the guests of one group
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from rsvp.core.db import transaction
from rsvp.core.errors import CapacityFailure, InvalidSubmission, ValidationFailure
from rsvp.models import Guest
from rsvp.schemas.guest import AttendeeResponse
from rsvp.services.access_service import AccessService
from rsvp.services.repositories import GuestRepo
from rsvp.services.validation import MAX_PARTY_SIZE, parse_guest_id, validate_location_for_group

logger = logging.getLogger(__name__)

class AttendanceService:
    """Service for toggling and listing location attendance"""

    @staticmethod
    def set_attendance(
        db: Session,
        guest_id: Any,
        group_id: Any,
        invitation_code: Any,
        location: Optional[str],
        attending: Optional[bool]
    ) -> Guest:
        """Add or remove one location for one guest (idempotent)"""
        group_locations = AccessService.authenticate(db, group_id, invitation_code)

        if attending is None:
            raise ValidationFailure("Attending flag cannot be null", field="attending")

        guest = AccessService.check_membership(db, guest_id, group_id)
        validate_location_for_group(location, group_locations)

        with transaction(db):
            current = list(guest.attending_locations or [])
            if attending and location not in current:
                guest.attending_locations = current + [location]
            elif not attending and location in current:
                guest.attending_locations = [loc for loc in current if loc != location]

        db.refresh(guest)
        return guest

    @staticmethod
    def list_attendees(
        db: Session,
        group_id: Any,
        invitation_code: Any,
        location: Optional[str]
    ) -> List[AttendeeResponse]:
        """Guests of the group attending ``location``, ordered by name"""
        group = AccessService.resolve_group(db, group_id, invitation_code)
        validate_location_for_group(location, group.locations)

        return [
            AttendeeResponse(
                guest_id=guest.id,
                guest_name=guest.name,
                dietary_preferences=guest.dietary_preferences
            )
            for guest in GuestRepo.list_for_group_by_name(db, group.id)
            if location in (guest.attending_locations or [])
        ]

    @staticmethod
    def bulk_set_attendance(
        db: Session,
        group_id: Any,
        invitation_code: Any,
        location: Optional[str],
        guest_ids: Any
    ) -> List[AttendeeResponse]:
        """Make exactly ``guest_ids`` the group's attendees for ``location``.

        The location is first cleared from every guest of the group, then
        added back to the listed guests; ids of guests outside the group
        are ignored.
        """
        group = AccessService.resolve_group(db, group_id, invitation_code)

        if guest_ids is None:
            raise InvalidSubmission("Guest IDs array cannot be null", field="guest_ids")
        if not isinstance(guest_ids, list):
            raise InvalidSubmission("Guest IDs must be a list", field="guest_ids")
        if len(guest_ids) > MAX_PARTY_SIZE:
            raise CapacityFailure(f"Cannot update more than {MAX_PARTY_SIZE} guests at once", field="guest_ids")

        wanted = set()
        for raw_id in guest_ids:
            parsed = parse_guest_id(raw_id)
            if parsed is None:
                raise InvalidSubmission(f"Invalid guest id: {raw_id!r}", field="guest_ids")
            wanted.add(parsed)

        validate_location_for_group(location, group.locations)

        with transaction(db):
            for guest in GuestRepo.list_for_group(db, group.id):
                current = list(guest.attending_locations or [])
                cleared = [loc for loc in current if loc != location]
                if guest.id in wanted:
                    cleared.append(location)
                if cleared != current:
                    guest.attending_locations = cleared

        logger.info(f"Attendance for '{location}' in group {group.id} set to {len(wanted)} requested guests")
        return AttendanceService.list_attendees(db, group_id, invitation_code, location)
