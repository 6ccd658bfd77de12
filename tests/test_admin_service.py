"""
Tests for admin management of groups and guests
"""

import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from rsvp.core.db import Base
from rsvp.core.errors import (
    CapacityFailure,
    InvalidGroupField,
    InvalidLocation,
    InvitationCodeImmutable,
    NotFound,
    PartySizeOutOfRange,
)
from rsvp.models import GuestGroup, Guest
from rsvp.schemas.group import GuestGroupCreate, GuestGroupUpdate
from rsvp.schemas.guest import GuestEntry, GuestUpdate
from rsvp.services.admin_service import AdminService
from rsvp.services.rsvp_service import RsvpService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_admin.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN = "organizer@example.com"

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def group(db_session):
    return AdminService.create_group(db_session, GuestGroupCreate(
        name="The Smiths",
        email="smiths@example.com",
        party_size=2,
        locations=["sardinia", "nice"],
    ), ADMIN)

class TestGroups:
    """Test guest group management"""

    def test_create_group(self, db_session, group):
        assert isinstance(group.invitation_code, uuid.UUID)
        assert group.invited_by == [ADMIN]
        assert group.default_language == "en"
        assert group.rsvp_submitted is False

    def test_create_group_rejects_bad_fields(self, db_session):
        with pytest.raises(InvalidGroupField):
            AdminService.create_group(db_session, GuestGroupCreate(name="  ", locations=["nice"]), ADMIN)
        with pytest.raises(InvalidGroupField):
            AdminService.create_group(db_session, GuestGroupCreate(name="X", locations=[]), ADMIN)
        with pytest.raises(PartySizeOutOfRange):
            AdminService.create_group(
                db_session, GuestGroupCreate(name="X", locations=["nice"], party_size=25), ADMIN
            )
        assert db_session.query(GuestGroup).count() == 0

    def test_invitation_code_is_immutable(self, db_session, group):
        original = group.invitation_code

        with pytest.raises(InvitationCodeImmutable):
            AdminService.update_group(db_session, group.id, GuestGroupUpdate(invitation_code=uuid.uuid4()))

        db_session.refresh(group)
        assert group.invitation_code == original

    def test_same_invitation_code_is_a_no_op(self, db_session, group):
        updated = AdminService.update_group(
            db_session, group.id, GuestGroupUpdate(invitation_code=group.invitation_code, name="Smith Family")
        )
        assert updated.name == "Smith Family"

    def test_code_cannot_be_reassigned_on_the_model(self, db_session, group):
        with pytest.raises(InvitationCodeImmutable):
            group.invitation_code = uuid.uuid4()

    def test_partial_update(self, db_session, group):
        updated = AdminService.update_group(db_session, group.id, GuestGroupUpdate(
            party_size=4, default_language="it", invitation_sent=True
        ))

        assert updated.party_size == 4
        assert updated.default_language == "it"
        assert updated.invitation_sent is True
        assert updated.name == "The Smiths"

    def test_removing_location_still_attended_is_rejected(self, db_session, group):
        AdminService.create_guest(db_session, group.id, GuestEntry(name="John", attending_locations=["nice"]))

        with pytest.raises(InvalidGroupField) as exc_info:
            AdminService.update_group(db_session, group.id, GuestGroupUpdate(locations=["sardinia"]))
        assert exc_info.value.field == "locations"

        updated = AdminService.update_group(db_session, group.id, GuestGroupUpdate(locations=["nice"]))
        assert updated.locations == ["nice"]

    def test_delete_group_cascades_to_guests(self, db_session, group):
        AdminService.create_guest(db_session, group.id, GuestEntry(name="John", attending_locations=[]))

        deleted_id = AdminService.delete_group(db_session, group.id)

        assert deleted_id is not None
        assert db_session.query(GuestGroup).count() == 0
        assert db_session.query(Guest).count() == 0

    def test_unknown_group(self, db_session):
        with pytest.raises(NotFound):
            AdminService.get_group(db_session, uuid.uuid4())
        with pytest.raises(NotFound):
            AdminService.get_group(db_session, "nope")

    def test_list_groups_with_counts_and_search(self, db_session, group):
        AdminService.create_guest(db_session, group.id, GuestEntry(name="John", attending_locations=[]))
        AdminService.create_group(db_session, GuestGroupCreate(name="The Rossis", locations=["tunisia"]), ADMIN)

        rows, total = AdminService.list_groups(db_session)
        assert total == 2
        assert [(g.name, count) for g, count in rows] == [("The Rossis", 0), ("The Smiths", 1)]

        rows, total = AdminService.list_groups(db_session, search="smith")
        assert total == 1
        assert rows[0][0].name == "The Smiths"

        rows, total = AdminService.list_groups(db_session, page=2, per_page=1)
        assert total == 2
        assert [g.name for g, _ in rows] == ["The Smiths"]

class TestGuests:
    """Test admin guest management"""

    def test_admin_guests_are_not_self_added(self, db_session, group):
        guest = AdminService.create_guest(
            db_session, group.id, GuestEntry(name="John", attending_locations=["nice", "nice"])
        )

        assert guest.self_added is False
        assert guest.attending_locations == ["nice"]

    def test_guest_must_fit_group_locations(self, db_session, group):
        with pytest.raises(InvalidLocation):
            AdminService.create_guest(db_session, group.id, GuestEntry(name="John", attending_locations=["tunisia"]))

    def test_guest_ceiling(self, db_session, group):
        for i in range(20):
            AdminService.create_guest(db_session, group.id, GuestEntry(name=f"Guest {i}", attending_locations=[]))

        with pytest.raises(CapacityFailure):
            AdminService.create_guest(db_session, group.id, GuestEntry(name="Guest 21", attending_locations=[]))

    def test_update_guest_merges_fields(self, db_session, group):
        guest = AdminService.create_guest(
            db_session, group.id,
            GuestEntry(name="John", attending_locations=["nice"], dietary_preferences={"halal": True})
        )

        updated = AdminService.update_guest(db_session, guest.id, GuestUpdate(age_category="child_under_10"))

        assert updated.age_category == "child_under_10"
        assert updated.name == "John"
        assert updated.dietary_preferences["halal"] is True

    def test_delete_guest(self, db_session, group):
        guest = AdminService.create_guest(db_session, group.id, GuestEntry(name="John", attending_locations=[]))

        assert AdminService.delete_guest(db_session, guest.id) == guest.id
        with pytest.raises(NotFound):
            AdminService.delete_guest(db_session, guest.id)

    def test_guests_for_location(self, db_session, group):
        AdminService.create_guest(db_session, group.id, GuestEntry(name="John", attending_locations=["nice"]))
        AdminService.create_guest(db_session, group.id, GuestEntry(name="Jane", attending_locations=["sardinia"]))

        assert [guest.name for guest in AdminService.guests_for_location(db_session, "nice")] == ["John"]
        with pytest.raises(InvalidLocation):
            AdminService.guests_for_location(db_session, "paris")

class TestStats:
    """Test dashboard statistics"""

    def test_stats(self, db_session, group):
        AdminService.create_group(db_session, GuestGroupCreate(name="The Rossis", locations=["tunisia"]), ADMIN)
        RsvpService.reconcile(db_session, group.id, group.invitation_code, [
            {"name": "Alice", "attending_locations": ["sardinia", "nice"], "dietary_preferences": {"vegan": True}},
            {"name": "Bob", "attending_locations": [], "dietary_preferences": {"vegetarian": True}},
        ])

        stats = AdminService.get_stats(db_session)

        assert stats.total_groups == 2
        assert stats.submitted_groups == 1
        assert stats.total_guests == 2
        assert stats.total_confirmed == 1
        assert stats.pending_rsvps == 1
        assert stats.location_counts == {"sardinia": 1, "tunisia": 0, "nice": 1}
        # only confirmed guests count towards dietary totals
        assert stats.dietary_counts["vegan"] == 1
        assert stats.dietary_counts["vegetarian"] == 0

class TestStorageConstraints:
    """Test that the database rejects rows written around the services"""

    @pytest.mark.parametrize("fields", [
        {"default_language": "de"},
        {"email": "x" * 250 + "@example.com"},
        {"party_size": 0},
    ])
    def test_invalid_group_row(self, db_session, fields):
        db_session.add(GuestGroup(name="The Smiths", locations=["nice"], **fields))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        assert db_session.query(GuestGroup).count() == 0

    def test_invalid_age_category_row(self, db_session, group):
        db_session.add(Guest(guest_group_id=group.id, name="John", attending_locations=[], age_category="teenager"))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        assert db_session.query(Guest).count() == 0
