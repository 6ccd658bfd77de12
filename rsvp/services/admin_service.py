"""
Administrative operations on groups and guests.

Admins are trusted callers: no invitation code is checked, but every field
goes through the same validation as the invitee flow.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from rsvp.core.config import settings
from rsvp.core.db import transaction
from rsvp.core.errors import CapacityFailure, InvalidGroupField, InvalidLocation, NotFound
from rsvp.models import Guest, GuestGroup
from rsvp.schemas.group import AdminStats, GuestGroupCreate, GuestGroupUpdate
from rsvp.schemas.guest import DietaryPreferences, GuestEntry, GuestUpdate
from rsvp.services.repositories import GroupRepo, GuestRepo
from rsvp.services.validation import (
    MAX_PARTY_SIZE,
    VALID_LOCATIONS,
    normalize_guest_fields,
    validate_group_email,
    validate_group_locations,
    validate_group_name,
    validate_language,
    validate_notes,
    validate_party_size,
)

logger = logging.getLogger(__name__)


def _parse_id(value: Any, resource: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFound(resource)


class AdminService:
    """Direct management of guest groups and guests"""

    # -------- Guest groups --------

    @staticmethod
    def get_group(db: Session, group_id: Any) -> GuestGroup:
        group = GroupRepo.get_by_id(db, _parse_id(group_id, "Guest group"))
        if not group:
            raise NotFound("Guest group")
        return group

    @staticmethod
    def list_groups(
        db: Session,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 50
    ) -> Tuple[List[Tuple[GuestGroup, int]], int]:
        """Groups ordered by name with their guest counts, plus the total match count"""
        offset = (page - 1) * per_page
        return GroupRepo.list_with_counts(db, search=search, offset=offset, limit=per_page)

    @staticmethod
    def create_group(db: Session, data: GuestGroupCreate, admin_email: str) -> GuestGroup:
        group = GuestGroup(
            name=validate_group_name(data.name),
            email=validate_group_email(data.email),
            party_size=validate_party_size(data.party_size),
            locations=validate_group_locations(data.locations),
            default_language=validate_language(data.default_language),
            additional_notes=validate_notes(data.additional_notes),
            invited_by=list(data.invited_by) if data.invited_by else [admin_email]
        )

        with transaction(db):
            db.add(group)

        db.refresh(group)
        logger.info(f"Guest group {group.id} created by {admin_email}")
        return group

    @staticmethod
    def update_group(db: Session, group_id: Any, data: GuestGroupUpdate) -> GuestGroup:
        group = AdminService.get_group(db, group_id)
        changes = data.model_dump(exclude_unset=True)

        if "invitation_code" in changes:
            # Same code is a no-op; a different one raises InvitationCodeImmutable
            group.invitation_code = changes.pop("invitation_code")

        updates: Dict[str, Any] = {}
        if "name" in changes:
            updates["name"] = validate_group_name(changes["name"])
        if "email" in changes:
            updates["email"] = validate_group_email(changes["email"])
        if "party_size" in changes:
            updates["party_size"] = validate_party_size(changes["party_size"])
        if "locations" in changes:
            locations = validate_group_locations(changes["locations"])
            # Guests may only attend locations their group is invited to
            stranded = [
                guest.name for guest in GuestRepo.list_for_group(db, group.id)
                if not set(guest.attending_locations or []) <= set(locations)
            ]
            if stranded:
                raise InvalidGroupField(
                    f"Cannot remove locations still selected by: {', '.join(stranded)}",
                    field="locations"
                )
            updates["locations"] = locations
        if "default_language" in changes:
            updates["default_language"] = validate_language(changes["default_language"])
        if "additional_notes" in changes:
            updates["additional_notes"] = validate_notes(changes["additional_notes"])
        if changes.get("invitation_sent") is not None:
            updates["invitation_sent"] = changes["invitation_sent"]
        if changes.get("invited_by") is not None:
            updates["invited_by"] = list(changes["invited_by"])

        with transaction(db):
            for field, value in updates.items():
                setattr(group, field, value)

        db.refresh(group)
        logger.info(f"Guest group {group.id} updated ({', '.join(sorted(updates)) or 'no changes'})")
        return group

    @staticmethod
    def delete_group(db: Session, group_id: Any) -> UUID:
        """Delete a group; its guests go with it"""
        group = AdminService.get_group(db, group_id)
        deleted_id = group.id

        with transaction(db):
            db.delete(group)

        logger.info(f"Guest group {deleted_id} deleted")
        return deleted_id

    # -------- Guests --------

    @staticmethod
    def list_group_guests(db: Session, group_id: Any) -> List[Guest]:
        group = AdminService.get_group(db, group_id)
        return GuestRepo.list_for_group(db, group.id)

    @staticmethod
    def create_guest(db: Session, group_id: Any, entry: GuestEntry) -> Guest:
        """Add an organizer-entered guest; reconciliation never deletes these"""
        group = AdminService.get_group(db, group_id)

        current_count = GuestRepo.count_for_group(db, group.id)
        if current_count >= MAX_PARTY_SIZE:
            raise CapacityFailure(f"A group cannot have more than {MAX_PARTY_SIZE} guests", field="guests")

        normalized = normalize_guest_fields(
            entry.name, entry.attending_locations, entry.dietary_preferences, entry.age_category, group.locations
        )
        guest = Guest(
            guest_group_id=group.id,
            name=normalized.name,
            attending_locations=normalized.attending_locations,
            dietary_preferences=normalized.dietary_preferences,
            age_category=normalized.age_category,
            self_added=False
        )

        with transaction(db):
            db.add(guest)

        db.refresh(guest)
        logger.info(f"Guest {guest.id} created in group {group.id}")
        return guest

    @staticmethod
    def update_guest(db: Session, guest_id: Any, data: GuestUpdate) -> Guest:
        guest = GuestRepo.get_by_id(db, _parse_id(guest_id, "Guest"))
        if not guest:
            raise NotFound("Guest")

        changes = data.model_dump(exclude_unset=True)
        normalized = normalize_guest_fields(
            changes.get("name", guest.name),
            changes.get("attending_locations", guest.attending_locations),
            changes.get("dietary_preferences", guest.dietary_preferences),
            changes.get("age_category", guest.age_category),
            guest.group.locations
        )

        with transaction(db):
            guest.name = normalized.name
            guest.attending_locations = normalized.attending_locations
            guest.dietary_preferences = normalized.dietary_preferences
            guest.age_category = normalized.age_category

        db.refresh(guest)
        return guest

    @staticmethod
    def delete_guest(db: Session, guest_id: Any) -> UUID:
        guest = GuestRepo.get_by_id(db, _parse_id(guest_id, "Guest"))
        if not guest:
            raise NotFound("Guest")
        deleted_id = guest.id

        with transaction(db):
            db.delete(guest)

        logger.info(f"Guest {deleted_id} deleted")
        return deleted_id

    @staticmethod
    def guests_for_location(db: Session, location: str) -> List[Guest]:
        """Every guest, across groups, attending ``location``"""
        if location not in VALID_LOCATIONS:
            raise InvalidLocation(
                f"Invalid location. Must be one of: {', '.join(settings.LOCATIONS)}", field="location"
            )
        return [
            guest for guest in GuestRepo.list_all(db)
            if location in (guest.attending_locations or [])
        ]

    # -------- Dashboard --------

    @staticmethod
    def get_stats(db: Session) -> AdminStats:
        groups = GroupRepo.list_all(db)
        guests = GuestRepo.list_all(db)

        confirmed = [guest for guest in guests if guest.attending_locations]
        location_counts = {location: 0 for location in settings.LOCATIONS}
        dietary_keys = [key for key in DietaryPreferences.model_fields if key != "other"]
        dietary_counts = {key: 0 for key in dietary_keys}
        dietary_counts["other"] = 0

        for guest in confirmed:
            for location in guest.attending_locations:
                if location in location_counts:
                    location_counts[location] += 1
            prefs = guest.dietary_preferences or {}
            for key in dietary_keys:
                if prefs.get(key):
                    dietary_counts[key] += 1
            if prefs.get("other"):
                dietary_counts["other"] += 1

        return AdminStats(
            total_groups=len(groups),
            submitted_groups=sum(1 for group in groups if group.rsvp_submitted),
            total_guests=len(guests),
            total_confirmed=len(confirmed),
            pending_rsvps=len(guests) - len(confirmed),
            location_counts=location_counts,
            dietary_counts=dietary_counts
        )
