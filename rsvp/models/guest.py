"""
Guest model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Uuid, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from rsvp.core.config import settings
from rsvp.core.db import Base, sql_in_list

def default_dietary_preferences() -> dict:
    return {
        "vegetarian": False,
        "vegan": False,
        "halal": False,
        "no_pork": False,
        "gluten_free": False,
        "other": "",
    }

class Guest(Base):
    __tablename__ = "guests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    guest_group_id = Column(Uuid, ForeignKey("guest_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    attending_locations = Column(JSON, nullable=False, default=list)
    dietary_preferences = Column(JSON, nullable=False, default=default_dietary_preferences)
    age_category = Column(String(32), nullable=False, default="adult")
    self_added = Column(Boolean, nullable=False, default=False)  # False = created by an admin
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    group = relationship("GuestGroup", back_populates="guests")

    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="guests_name_not_empty"),
        CheckConstraint("length(name) <= 200", name="guests_name_length"),
        CheckConstraint(
            f"age_category IN ({sql_in_list(settings.AGE_CATEGORIES)})",
            name="guests_age_category_valid",
        ),
    )
