"""
Guest-group Pydantic schemas
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr

class GuestGroupCreate(BaseModel):
    """Schema for creating a guest group (admin)"""
    name: str
    email: Optional[EmailStr] = None
    party_size: int = 1
    locations: List[str]
    default_language: str = "en"
    additional_notes: Optional[str] = None
    invited_by: Optional[List[EmailStr]] = None

class GuestGroupUpdate(BaseModel):
    """Partial update of a guest group (admin)"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    party_size: Optional[int] = None
    locations: Optional[List[str]] = None
    default_language: Optional[str] = None
    additional_notes: Optional[str] = None
    invitation_sent: Optional[bool] = None
    invited_by: Optional[List[EmailStr]] = None
    invitation_code: Optional[UUID] = None

class GuestGroupPublic(BaseModel):
    """Public projection: every group field except the invitation code"""
    id: UUID
    name: str
    email: Optional[str] = None
    party_size: int
    locations: List[str]
    default_language: str
    additional_notes: Optional[str] = None
    invited_by: List[str] = []
    invitation_sent: bool = False
    rsvp_submitted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class GuestGroupAdmin(GuestGroupPublic):
    """Admin view, includes the invitation code and guest count"""
    invitation_code: UUID
    guest_count: int = 0

class PartySizeUpdate(BaseModel):
    party_size: Optional[int]

class NotesUpdate(BaseModel):
    additional_notes: Optional[str] = None

class AdminStats(BaseModel):
    """Dashboard statistics"""
    total_groups: int
    submitted_groups: int
    total_guests: int
    total_confirmed: int
    pending_rsvps: int
    location_counts: Dict[str, int]
    dietary_counts: Dict[str, int]
