"""
Guest group model (one invitation / household)
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, JSON, Uuid, CheckConstraint
from sqlalchemy.orm import relationship, validates

from rsvp.core.config import settings
from rsvp.core.db import Base, sql_in_list
from rsvp.core.errors import InvitationCodeImmutable

class GuestGroup(Base):
    __tablename__ = "guest_groups"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=True)
    invitation_code = Column(Uuid, unique=True, nullable=False, index=True, default=uuid.uuid4)
    party_size = Column(Integer, nullable=False, default=1)
    locations = Column(JSON, nullable=False)
    default_language = Column(String(5), nullable=False, default="en")
    additional_notes = Column(Text, nullable=True)
    invited_by = Column(JSON, nullable=False, default=list)
    invitation_sent = Column(Boolean, nullable=False, default=False)
    rsvp_submitted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    guests = relationship(
        "Guest",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Guest.created_at",
    )

    __table_args__ = (
        CheckConstraint("party_size >= 1 AND party_size <= 20", name="guest_groups_party_size_range"),
        CheckConstraint("length(trim(name)) > 0", name="guest_groups_name_not_empty"),
        CheckConstraint("length(name) <= 200", name="guest_groups_name_length"),
        CheckConstraint(
            "additional_notes IS NULL OR length(additional_notes) <= 2000",
            name="guest_groups_additional_notes_length",
        ),
        CheckConstraint("email IS NULL OR length(email) <= 254", name="guest_groups_email_length"),
        CheckConstraint(
            f"default_language IN ({sql_in_list(settings.LANGUAGES)})",
            name="guest_groups_default_language_valid",
        ),
    )

    @validates("invitation_code")
    def _keep_invitation_code(self, key, value):
        current = self.invitation_code
        if current is not None and value != current:
            raise InvitationCodeImmutable()
        return value
