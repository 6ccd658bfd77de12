"""
Domain errors raised by the roster services.

Every error carries a stable ``kind`` (rendered as ``error_code``), an HTTP
status and, for validation failures, the offending ``field``.
"""

from typing import Optional


class RosterError(Exception):
    """Base class for all roster failures"""

    kind = "error"
    status_code = 400
    field: Optional[str] = None

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field


class AuthFailure(RosterError):
    """Group id / invitation code pair does not match any group"""

    kind = "auth_failure"
    status_code = 401

    def __init__(self, message: str = "Invalid guest group or invitation code"):
        super().__init__(message)


class MembershipFailure(RosterError):
    kind = "membership_failure"
    status_code = 403

    def __init__(self, message: str = "Guest does not belong to this group"):
        super().__init__(message)


class ProtectedGuest(RosterError):
    """Invitee tried to remove a guest entered by the organizers"""

    kind = "protected_guest"
    status_code = 403

    def __init__(self, message: str = "Guests added by the organizers cannot be removed from the invitation"):
        super().__init__(message)


class NotFound(RosterError):
    kind = "not_found"
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class CapacityFailure(RosterError):
    """Guest count or submission size exceeds a fixed ceiling"""

    kind = "capacity_failure"
    status_code = 409


class ValidationFailure(RosterError):
    kind = "validation_failure"
    status_code = 422


class InvalidName(ValidationFailure):
    field = "name"


class InvalidLocation(ValidationFailure):
    field = "attending_locations"


class InvalidDietary(ValidationFailure):
    field = "dietary_preferences"


class InvalidAgeCategory(ValidationFailure):
    field = "age_category"


class NotesTooLong(ValidationFailure):
    field = "additional_notes"


class PartySizeOutOfRange(ValidationFailure):
    field = "party_size"


class InvalidSubmission(ValidationFailure):
    field = "guests"


class InvalidGroupField(ValidationFailure):
    """Admin-supplied group field (name, email, locations, language) is invalid"""


class InvitationCodeImmutable(ValidationFailure):
    field = "invitation_code"

    def __init__(self, message: str = "invitation_code cannot be modified after creation"):
        super().__init__(message)
