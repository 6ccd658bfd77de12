"""
Pydantic schemas package
"""

from .common import *
from .group import *
from .guest import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "GuestGroupCreate",
    "GuestGroupUpdate",
    "GuestGroupPublic",
    "GuestGroupAdmin",
    "PartySizeUpdate",
    "NotesUpdate",
    "AdminStats",
    "DietaryPreferences",
    "GuestEntry",
    "GuestReplace",
    "GuestUpdate",
    "GuestResponse",
    "AttendeeResponse",
    "RsvpSubmission",
    "AttendanceUpdate",
    "BulkAttendanceUpdate",
    "LoginRequest"
]
