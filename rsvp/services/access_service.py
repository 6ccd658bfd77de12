"""
Authorization gate for guest-facing operations.

Anonymous callers are identified only by possession of a group's
invitation code; every guest-facing operation passes through here first.
"""

import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from rsvp.core.errors import AuthFailure, MembershipFailure
from rsvp.models import Guest, GuestGroup
from rsvp.services.repositories import GroupRepo, GuestRepo

logger = logging.getLogger(__name__)


def _as_uuid(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class AccessService:
    """Invitation-code authentication and guest membership checks"""

    @staticmethod
    def resolve_group(db: Session, group_id: Any, invitation_code: Any) -> GuestGroup:
        """Return the group matching both fields, or raise ``AuthFailure``.

        A malformed id, an unknown group and a wrong code all fail the same
        way so probing callers cannot tell which groups exist.
        """
        group_uuid = _as_uuid(group_id)
        code_uuid = _as_uuid(invitation_code)
        group = None
        if group_uuid is not None and code_uuid is not None:
            group = GroupRepo.get_by_credentials(db, group_uuid, code_uuid)
        if group is None:
            logger.warning(f"Rejected invitation code for guest group {group_id}")
            raise AuthFailure()
        return group

    @staticmethod
    def authenticate(db: Session, group_id: Any, invitation_code: Any) -> List[str]:
        """Verify the pair and return the group's invited locations"""
        group = AccessService.resolve_group(db, group_id, invitation_code)
        return list(group.locations)

    @staticmethod
    def check_membership(db: Session, guest_id: Any, group_id: Any) -> Guest:
        """Raise ``MembershipFailure`` unless the guest belongs to the group"""
        guest_uuid = _as_uuid(guest_id)
        group_uuid = _as_uuid(group_id)
        guest = None
        if guest_uuid is not None and group_uuid is not None:
            guest = GuestRepo.get_in_group(db, guest_uuid, group_uuid)
        if guest is None:
            logger.warning(f"Guest {guest_id} is not a member of group {group_id}")
            raise MembershipFailure()
        return guest

    @staticmethod
    def login(db: Session, invitation_code: Any) -> GuestGroup:
        """Resolve a group from its invitation code alone (invitation landing page)"""
        code_uuid = _as_uuid(invitation_code)
        group = GroupRepo.get_by_invitation_code(db, code_uuid) if code_uuid is not None else None
        if group is None:
            logger.warning("Rejected invitation code login")
            raise AuthFailure("Invalid invitation code")
        return group
