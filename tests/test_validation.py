"""
Tests for guest and group input validation
"""

import uuid

import pytest

from rsvp.core.errors import (
    InvalidAgeCategory,
    InvalidDietary,
    InvalidGroupField,
    InvalidLocation,
    InvalidName,
    InvalidSubmission,
    NotesTooLong,
    PartySizeOutOfRange,
    ValidationFailure,
)
from rsvp.services.validation import (
    normalize_guest_fields,
    parse_guest_entry,
    parse_guest_id,
    validate_dietary_preferences,
    validate_group_locations,
    validate_language,
    validate_location_for_group,
    validate_notes,
    validate_party_size,
)

GROUP_LOCATIONS = ["sardinia", "nice"]

def normalize(**overrides):
    fields = {
        "name": "Alice",
        "attending_locations": ["sardinia"],
        "dietary_preferences": {},
        "age_category": "adult",
        "group_locations": GROUP_LOCATIONS,
    }
    fields.update(overrides)
    return normalize_guest_fields(**fields)

class TestNormalizeGuestFields:
    """Test single-guest normalization"""

    def test_trims_name_and_fills_dietary_defaults(self):
        result = normalize(name="  Alice  ")

        assert result.name == "Alice"
        assert result.dietary_preferences == {
            "vegetarian": False,
            "vegan": False,
            "halal": False,
            "no_pork": False,
            "gluten_free": False,
            "other": "",
        }
        assert result.age_category == "adult"

    def test_deduplicates_locations_keeping_first_occurrence(self):
        result = normalize(attending_locations=["nice", "sardinia", "nice"])
        assert result.attending_locations == ["nice", "sardinia"]

    def test_empty_location_list_is_allowed(self):
        assert normalize(attending_locations=[]).attending_locations == []

    @pytest.mark.parametrize("name", ["", "   ", "x" * 201])
    def test_rejects_bad_names(self, name):
        with pytest.raises(InvalidName) as exc_info:
            normalize(name=name)
        assert exc_info.value.field == "name"

    def test_name_of_exactly_200_characters_is_accepted(self):
        assert len(normalize(name="x" * 200).name) == 200

    def test_null_fields_are_rejected(self):
        with pytest.raises(InvalidName):
            normalize(name=None)
        with pytest.raises(InvalidLocation):
            normalize(attending_locations=None)
        with pytest.raises(InvalidDietary):
            normalize(dietary_preferences=None)
        with pytest.raises(InvalidAgeCategory):
            normalize(age_category=None)

    def test_rejects_unknown_age_category(self):
        with pytest.raises(InvalidAgeCategory):
            normalize(age_category="teenager")

    def test_rejects_location_outside_global_set(self):
        with pytest.raises(InvalidLocation) as exc_info:
            normalize(attending_locations=["paris"])
        assert "nice" in exc_info.value.message

    def test_rejects_location_outside_group(self):
        with pytest.raises(InvalidLocation) as exc_info:
            normalize(attending_locations=["tunisia"])
        assert "group" in exc_info.value.message

    def test_name_checked_before_locations(self):
        with pytest.raises(InvalidName):
            normalize(name="", attending_locations=["paris"])

    def test_errors_are_validation_failures(self):
        with pytest.raises(ValidationFailure):
            normalize(age_category="elder")

class TestDietaryPreferences:
    """Test dietary record validation"""

    def test_partial_record_is_completed(self):
        result = validate_dietary_preferences({"vegan": True, "other": "no nuts"})
        assert result["vegan"] is True
        assert result["vegetarian"] is False
        assert result["other"] == "no nuts"

    @pytest.mark.parametrize("prefs", [
        {"kosher": True},
        {"vegan": "yes"},
        {"vegan": 1},
        {"other": 5},
        {"other": "x" * 501},
        ["vegan"],
        "vegan",
    ])
    def test_rejects_invalid_records(self, prefs):
        with pytest.raises(InvalidDietary) as exc_info:
            validate_dietary_preferences(prefs)
        assert exc_info.value.field == "dietary_preferences"

    def test_other_of_500_characters_is_accepted(self):
        assert len(validate_dietary_preferences({"other": "x" * 500})["other"]) == 500

    def test_rejects_record_serializing_over_limit(self):
        # each quote serializes as two characters
        with pytest.raises(InvalidDietary):
            validate_dietary_preferences({"other": '"' * 500})

class TestSingleLocation:
    """Test single-location checks"""

    def test_accepts_group_location(self):
        assert validate_location_for_group("nice", GROUP_LOCATIONS) == "nice"

    @pytest.mark.parametrize("location", [None, "paris", "tunisia"])
    def test_rejects_bad_location(self, location):
        with pytest.raises(InvalidLocation) as exc_info:
            validate_location_for_group(location, GROUP_LOCATIONS)
        assert exc_info.value.field == "location"

class TestGroupFields:
    """Test group-level field checks"""

    def test_notes_limit(self):
        assert validate_notes(None) is None
        assert validate_notes("x" * 2000) == "x" * 2000
        with pytest.raises(NotesTooLong):
            validate_notes("x" * 2001)

    @pytest.mark.parametrize("size", [None, 0, 21, -1, True, "3", 2.5])
    def test_party_size_rejections(self, size):
        with pytest.raises(PartySizeOutOfRange):
            validate_party_size(size)

    @pytest.mark.parametrize("size", [1, 20])
    def test_party_size_bounds(self, size):
        assert validate_party_size(size) == size

    def test_group_locations(self):
        assert validate_group_locations(["nice", "nice", "sardinia"]) == ["nice", "sardinia"]
        with pytest.raises(InvalidGroupField):
            validate_group_locations([])
        with pytest.raises(InvalidGroupField):
            validate_group_locations(["paris"])

    def test_language(self):
        assert validate_language("fr") == "fr"
        with pytest.raises(InvalidGroupField) as exc_info:
            validate_language("de")
        assert exc_info.value.field == "default_language"

class TestSubmissionEntries:
    """Test parsing of submitted guest entries"""

    def test_absent_fields_take_defaults(self):
        entry = parse_guest_entry({"name": "Alice", "attending_locations": ["nice"]})
        assert entry.age_category == "adult"
        assert entry.dietary_preferences == {}
        assert entry.id is None

    def test_explicit_null_age_category_is_kept(self):
        entry = parse_guest_entry({"name": "Alice", "attending_locations": [], "age_category": None})
        assert entry.age_category is None

    def test_client_echo_fields_are_ignored(self):
        entry = parse_guest_entry({
            "name": "Alice",
            "attending_locations": [],
            "self_added": False,
            "created_at": "2024-01-01T00:00:00",
        })
        assert not hasattr(entry, "self_added")

    def test_non_object_entry(self):
        with pytest.raises(InvalidSubmission) as exc_info:
            parse_guest_entry("Alice", position=2)
        assert exc_info.value.message.startswith("Guest #3")

    def test_wrong_field_type_maps_to_field_error(self):
        with pytest.raises(InvalidLocation):
            parse_guest_entry({"name": "Alice", "attending_locations": "nice"})
        with pytest.raises(InvalidName):
            parse_guest_entry({"name": 42, "attending_locations": []})

    def test_parse_guest_id(self):
        guest_id = uuid.uuid4()
        assert parse_guest_id(str(guest_id)) == guest_id
        assert parse_guest_id(guest_id) == guest_id
        assert parse_guest_id("temp_123") is None
        assert parse_guest_id(None) is None
        assert parse_guest_id(7) is None
