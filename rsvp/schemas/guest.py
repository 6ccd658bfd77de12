"""
Guest-related Pydantic schemas
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

class DietaryPreferences(BaseModel):
    """Dietary preference record; unknown keys and loose types are rejected"""
    vegetarian: bool = False
    vegan: bool = False
    halal: bool = False
    no_pork: bool = False
    gluten_free: bool = False
    other: str = Field(default="", max_length=500)

    class Config:
        extra = "forbid"
        strict = True

class GuestEntry(BaseModel):
    """One guest as submitted by a client.

    ``id`` is kept raw: anything that is not a UUID (e.g. a client-side
    ``temp_...`` placeholder) marks a guest that does not exist yet.
    Absent ``age_category`` / ``dietary_preferences`` take their documented
    defaults; an explicit ``null`` is kept so validation can reject it.
    Extra keys sent back by clients (timestamps, provenance) are ignored.
    """
    id: Optional[Any] = None
    name: Optional[str] = None
    attending_locations: Optional[List[str]] = None
    dietary_preferences: Optional[Dict[str, Any]] = Field(default_factory=dict)
    age_category: Optional[str] = "adult"

    class Config:
        extra = "ignore"

class GuestReplace(BaseModel):
    """Invitee replacement of one guest; every field must be sent"""
    name: Optional[str]
    attending_locations: Optional[List[str]]
    dietary_preferences: Optional[Dict[str, Any]]
    age_category: Optional[str]

class GuestUpdate(BaseModel):
    """Partial guest update (admin)"""
    name: Optional[str] = None
    attending_locations: Optional[List[str]] = None
    dietary_preferences: Optional[Dict[str, Any]] = None
    age_category: Optional[str] = None

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: UUID
    guest_group_id: UUID
    name: str
    attending_locations: List[str]
    dietary_preferences: Dict[str, Any]
    age_category: str
    self_added: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AttendeeResponse(BaseModel):
    """Guest attending one location"""
    guest_id: UUID
    guest_name: str
    dietary_preferences: Dict[str, Any]

class RsvpSubmission(BaseModel):
    """Full guest list submitted from the RSVP page"""
    guests: Any
    additional_notes: Optional[str] = None

class AttendanceUpdate(BaseModel):
    location: Optional[str]
    attending: Optional[bool]

class BulkAttendanceUpdate(BaseModel):
    guest_ids: Optional[List[str]]

class LoginRequest(BaseModel):
    """Invitation landing page login"""
    invitation_code: str
