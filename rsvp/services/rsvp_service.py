"""
RSVP submission: reconcile a submitted guest list with the stored roster.
"""

import logging
from typing import Any, List, Optional, Set
from uuid import UUID

from sqlalchemy.orm import Session

from rsvp.core.db import transaction
from rsvp.core.errors import AuthFailure, CapacityFailure, InvalidSubmission
from rsvp.core.locks import group_locks
from rsvp.models import Guest
from rsvp.services.access_service import AccessService
from rsvp.services.repositories import GroupRepo, GuestRepo
from rsvp.services.validation import (
    MAX_PARTY_SIZE,
    normalize_guest_fields,
    parse_guest_entry,
    parse_guest_id,
    validate_notes,
)

logger = logging.getLogger(__name__)

class RsvpService:
    """Service for whole-roster RSVP submissions"""

    @staticmethod
    def reconcile(
        db: Session,
        group_id: Any,
        invitation_code: Any,
        guests: Any,
        additional_notes: Optional[str] = None
    ) -> List[Guest]:
        """Make the group's roster match ``guests`` in one transaction.

        Entries carrying the id of an existing guest update that guest;
        every other entry creates a new self-added guest. Self-added guests
        missing from the submission are deleted afterwards, admin-created
        guests are left alone. Party size becomes the number of entries and
        the group is marked as submitted. Returns the stored guests in
        submission order.
        """
        group_uuid = AccessService.resolve_group(db, group_id, invitation_code).id

        if not isinstance(guests, list):
            raise InvalidSubmission("guests must be a list")
        if len(guests) < 1:
            raise InvalidSubmission("At least one guest is required")
        if len(guests) > MAX_PARTY_SIZE:
            raise CapacityFailure(f"Cannot submit more than {MAX_PARTY_SIZE} guests at once", field="guests")
        validate_notes(additional_notes)

        with group_locks.hold(group_uuid), transaction(db):
            locked_group = GroupRepo.lock(db, group_uuid)
            if locked_group is None:
                # Deleted by an admin between authentication and locking
                raise AuthFailure()
            group_locations = list(locked_group.locations)

            submitted_ids: List[UUID] = []
            seen_existing: Set[UUID] = set()
            stored: List[Guest] = []
            created = updated = 0

            for position, raw in enumerate(guests):
                entry = parse_guest_entry(raw, position)
                normalized = normalize_guest_fields(
                    entry.name,
                    entry.attending_locations,
                    entry.dietary_preferences,
                    entry.age_category,
                    group_locations
                )

                guest_id = parse_guest_id(entry.id)
                if guest_id is not None:
                    if guest_id in seen_existing:
                        raise InvalidSubmission(f"Guest #{position + 1}: guest {guest_id} was submitted twice")
                    seen_existing.add(guest_id)

                    guest = AccessService.check_membership(db, guest_id, group_uuid)
                    guest.name = normalized.name
                    guest.attending_locations = normalized.attending_locations
                    guest.dietary_preferences = normalized.dietary_preferences
                    guest.age_category = normalized.age_category
                    updated += 1
                else:
                    # New entries are always self-added, whatever the client claims
                    guest = Guest(
                        guest_group_id=group_uuid,
                        name=normalized.name,
                        attending_locations=normalized.attending_locations,
                        dietary_preferences=normalized.dietary_preferences,
                        age_category=normalized.age_category,
                        self_added=True
                    )
                    db.add(guest)
                    created += 1

                db.flush()
                submitted_ids.append(guest.id)
                stored.append(guest)

            removed = GuestRepo.list_self_added_not_in(db, group_uuid, submitted_ids)
            for guest in removed:
                db.delete(guest)

            locked_group.party_size = len(guests)
            if additional_notes is not None:
                locked_group.additional_notes = additional_notes
            locked_group.rsvp_submitted = True
            db.flush()

        logger.info(
            f"RSVP saved for group {group_uuid}: {created} created, {updated} updated, "
            f"{len(removed)} removed, party size {len(guests)}"
        )

        for guest in stored:
            db.refresh(guest)
        return stored
