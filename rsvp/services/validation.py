"""
Validation and normalization of untrusted guest and group input.

Pure functions: nothing here touches the database. Each check raises the
matching ``ValidationFailure`` subtype so callers can abort their
transaction before writing anything.
"""

import json
from typing import Any, Dict, Iterable, List, NamedTuple, Optional
from uuid import UUID

from pydantic import ValidationError

from rsvp.core.config import settings
from rsvp.core.errors import (
    InvalidAgeCategory,
    InvalidDietary,
    InvalidGroupField,
    InvalidLocation,
    InvalidName,
    InvalidSubmission,
    NotesTooLong,
    PartySizeOutOfRange,
)
from rsvp.schemas.guest import DietaryPreferences, GuestEntry

VALID_LOCATIONS = frozenset(settings.LOCATIONS)
VALID_AGE_CATEGORIES = frozenset(settings.AGE_CATEGORIES)
VALID_LANGUAGES = frozenset(settings.LANGUAGES)

MAX_NAME_LENGTH = 200
MAX_EMAIL_LENGTH = 254
MAX_NOTES_LENGTH = 2000
MAX_DIETARY_SIZE = 1000
MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 20


class NormalizedGuest(NamedTuple):
    name: str
    attending_locations: List[str]
    dietary_preferences: Dict[str, Any]
    age_category: str


def _joined(values: Iterable[str]) -> str:
    return ", ".join(values)


def validate_dietary_preferences(prefs: Any) -> Dict[str, Any]:
    """Check a dietary record and return it with every key filled in"""
    if prefs is None:
        raise InvalidDietary("Dietary preferences cannot be null")
    if isinstance(prefs, DietaryPreferences):
        prefs = prefs.model_dump()
    if not isinstance(prefs, dict):
        raise InvalidDietary("Dietary preferences must be an object")

    try:
        record = DietaryPreferences.model_validate(prefs)
    except ValidationError:
        raise InvalidDietary(
            "Invalid dietary preferences: must be an object with keys "
            "(vegetarian, vegan, halal, no_pork, gluten_free as booleans; "
            "other as string up to 500 chars)"
        )

    if len(json.dumps(prefs, ensure_ascii=False)) > MAX_DIETARY_SIZE:
        raise InvalidDietary(f"Dietary preferences must serialize to {MAX_DIETARY_SIZE} characters or less")

    return record.model_dump()


def normalize_guest_fields(
    name: Optional[str],
    attending_locations: Optional[List[str]],
    dietary_preferences: Any,
    age_category: Optional[str],
    group_locations: Iterable[str],
) -> NormalizedGuest:
    """Validate every mutable guest field and return the cleaned values.

    Used identically by single-guest create/update, admin writes and
    reconciliation.
    """
    # Required fields: absence is an error, never a silent default
    if name is None:
        raise InvalidName("Guest name cannot be null")
    if attending_locations is None:
        raise InvalidLocation("Attending locations cannot be null")
    if age_category is None:
        raise InvalidAgeCategory("Age category cannot be null")

    if not isinstance(name, str):
        raise InvalidName("Guest name must be text")
    name = name.strip()
    if not name:
        raise InvalidName("Guest name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidName(f"Guest name must be {MAX_NAME_LENGTH} characters or less")

    if not isinstance(attending_locations, (list, tuple)) or not all(
        isinstance(location, str) for location in attending_locations
    ):
        raise InvalidLocation("Attending locations must be a list of location names")
    locations = list(dict.fromkeys(attending_locations))

    dietary = validate_dietary_preferences(dietary_preferences)

    if not isinstance(age_category, str) or age_category not in VALID_AGE_CATEGORIES:
        raise InvalidAgeCategory(f"Invalid age category. Must be one of: {_joined(settings.AGE_CATEGORIES)}")

    if not set(locations) <= VALID_LOCATIONS:
        raise InvalidLocation(f"Invalid attending locations. Each location must be one of: {_joined(settings.LOCATIONS)}")

    group_locations = list(group_locations)
    if not set(locations) <= set(group_locations):
        raise InvalidLocation(
            f"Attending locations must be within the group's invited locations: {_joined(group_locations)}"
        )

    return NormalizedGuest(name, locations, dietary, age_category)


def validate_location_for_group(location: Optional[str], group_locations: Iterable[str]) -> str:
    """Single-location variant of the global-then-group check"""
    if location is None:
        raise InvalidLocation("Location cannot be null", field="location")

    if not isinstance(location, str) or location not in VALID_LOCATIONS:
        raise InvalidLocation(f"Invalid location. Must be one of: {_joined(settings.LOCATIONS)}", field="location")

    group_locations = list(group_locations)
    if location not in group_locations:
        raise InvalidLocation(
            f"Location '{location}' is not available for this group. Group locations: {_joined(group_locations)}",
            field="location",
        )
    return location


def validate_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise NotesTooLong("Additional notes must be text")
    if len(notes) > MAX_NOTES_LENGTH:
        raise NotesTooLong(f"Additional notes must be {MAX_NOTES_LENGTH} characters or less")
    return notes


def validate_party_size(party_size: Optional[int]) -> int:
    if party_size is None:
        raise PartySizeOutOfRange("Party size cannot be null")
    if isinstance(party_size, bool) or not isinstance(party_size, int):
        raise PartySizeOutOfRange("Party size must be a whole number")
    if party_size < MIN_PARTY_SIZE or party_size > MAX_PARTY_SIZE:
        raise PartySizeOutOfRange(f"Party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE}")
    return party_size


def validate_group_name(name: Optional[str]) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidGroupField("Group name cannot be empty", field="name")
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidGroupField(f"Group name must be {MAX_NAME_LENGTH} characters or less", field="name")
    return name


def validate_group_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    if len(email) > MAX_EMAIL_LENGTH:
        raise InvalidGroupField(f"Email must be {MAX_EMAIL_LENGTH} characters or less", field="email")
    return email


def validate_group_locations(locations: Optional[List[str]]) -> List[str]:
    """Invited locations: non-empty, deduplicated, all globally valid"""
    if not locations:
        raise InvalidGroupField("A group must be invited to at least one location", field="locations")
    locations = list(dict.fromkeys(locations))
    if not set(locations) <= VALID_LOCATIONS:
        raise InvalidGroupField(
            f"Invalid locations. Each location must be one of: {_joined(settings.LOCATIONS)}", field="locations"
        )
    return locations


def validate_language(language: Optional[str]) -> str:
    if language not in VALID_LANGUAGES:
        raise InvalidGroupField(
            f"Invalid language. Must be one of: {_joined(settings.LANGUAGES)}", field="default_language"
        )
    return language


_ENTRY_FIELD_ERRORS = {
    "name": InvalidName,
    "attending_locations": InvalidLocation,
    "dietary_preferences": InvalidDietary,
    "age_category": InvalidAgeCategory,
}


def parse_guest_entry(raw: Any, position: Optional[int] = None) -> GuestEntry:
    """Turn one submitted guest object into a ``GuestEntry``"""
    prefix = f"Guest #{position + 1}: " if position is not None else ""
    if isinstance(raw, GuestEntry):
        return raw
    if not isinstance(raw, dict):
        raise InvalidSubmission(f"{prefix}each guest must be an object")

    try:
        return GuestEntry.model_validate(raw)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = error["loc"][0] if error["loc"] else None
        error_cls = _ENTRY_FIELD_ERRORS.get(field, InvalidSubmission)
        raise error_cls(f"{prefix}{field}: {error['msg']}")


def parse_guest_id(value: Any) -> Optional[UUID]:
    """Return the UUID an entry refers to, or None for a not-yet-saved guest"""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value)
    except ValueError:
        return None
