"""
Guest-facing API routes - authenticated by invitation code
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rsvp.core.db import get_db
from rsvp.schemas.group import PartySizeUpdate, NotesUpdate
from rsvp.schemas.guest import (
    GuestEntry,
    GuestReplace,
    GuestResponse,
    RsvpSubmission,
    AttendanceUpdate,
    BulkAttendanceUpdate,
    LoginRequest,
)
from rsvp.services.access_service import AccessService
from rsvp.services.attendance_service import AttendanceService
from rsvp.services.group_service import GroupService
from rsvp.services.guest_service import GuestService
from rsvp.services.rsvp_service import RsvpService
from rsvp.utils.security import enforce_rate_limit, invitation_code_header
from rsvp.utils.responses import success_response

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

def _guest_data(guest) -> dict:
    return GuestResponse.model_validate(guest).model_dump(mode="json")

@router.post("/authenticate")
async def authenticate(
    login: LoginRequest,
    db: Session = Depends(get_db)
):
    """Open an invitation with its code"""
    group = AccessService.login(db, login.invitation_code)

    return success_response(
        message="Invitation found",
        data=GroupService.public_projection(group).model_dump(mode="json")
    )

@router.get("/groups/{group_id}/guests")
async def list_guests(
    group_id: str,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """List the guests of the caller's group"""
    guests = GuestService.list_guests(db, group_id, invitation_code)

    return success_response(
        message="Guests retrieved successfully",
        data=[_guest_data(guest) for guest in guests]
    )

@router.post("/groups/{group_id}/guests")
async def create_guest(
    group_id: str,
    entry: GuestEntry,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Add one guest to the caller's group"""
    guest = GuestService.create_guest(
        db,
        group_id=group_id,
        invitation_code=invitation_code,
        name=entry.name,
        attending_locations=entry.attending_locations,
        dietary_preferences=entry.dietary_preferences,
        age_category=entry.age_category
    )

    return success_response(
        message="Guest added successfully",
        data=_guest_data(guest),
        status_code=201
    )

@router.put("/groups/{group_id}/guests/{guest_id}")
async def update_guest(
    group_id: str,
    guest_id: str,
    entry: GuestReplace,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Replace one guest's details"""
    guest = GuestService.update_guest(
        db,
        guest_id=guest_id,
        group_id=group_id,
        invitation_code=invitation_code,
        name=entry.name,
        attending_locations=entry.attending_locations,
        dietary_preferences=entry.dietary_preferences,
        age_category=entry.age_category
    )

    return success_response(
        message="Guest updated successfully",
        data=_guest_data(guest)
    )

@router.delete("/groups/{group_id}/guests/{guest_id}")
async def delete_guest(
    group_id: str,
    guest_id: str,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Remove a guest the invitation added itself"""
    GuestService.delete_guest(db, guest_id, group_id, invitation_code)

    return success_response(
        message="Guest removed successfully",
        data={"deleted_guest_id": guest_id}
    )

@router.put("/groups/{group_id}/guests/{guest_id}/attendance")
async def set_attendance(
    group_id: str,
    guest_id: str,
    update: AttendanceUpdate,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Mark one guest as attending (or not) one location"""
    guest = AttendanceService.set_attendance(
        db,
        guest_id=guest_id,
        group_id=group_id,
        invitation_code=invitation_code,
        location=update.location,
        attending=update.attending
    )

    return success_response(
        message="Attendance updated",
        data=_guest_data(guest)
    )

@router.get("/groups/{group_id}/attendance/{location}")
async def list_attendees(
    group_id: str,
    location: str,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Guests of the group attending a location"""
    attendees = AttendanceService.list_attendees(db, group_id, invitation_code, location)

    return success_response(
        message="Attendees retrieved successfully",
        data=[attendee.model_dump(mode="json") for attendee in attendees]
    )

@router.put("/groups/{group_id}/attendance/{location}")
async def bulk_set_attendance(
    group_id: str,
    location: str,
    update: BulkAttendanceUpdate,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Set exactly which guests attend a location"""
    attendees = AttendanceService.bulk_set_attendance(
        db, group_id, invitation_code, location, update.guest_ids
    )

    return success_response(
        message="Attendance updated",
        data=[attendee.model_dump(mode="json") for attendee in attendees]
    )

@router.put("/groups/{group_id}/party-size")
async def set_party_size(
    group_id: str,
    update: PartySizeUpdate,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Change the number of people coming"""
    group = GroupService.set_party_size(db, group_id, invitation_code, update.party_size)

    return success_response(
        message="Party size updated",
        data=group.model_dump(mode="json")
    )

@router.put("/groups/{group_id}/notes")
async def set_notes(
    group_id: str,
    update: NotesUpdate,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Save the free-text notes for the organizers"""
    group = GroupService.set_notes(db, group_id, invitation_code, update.additional_notes)

    return success_response(
        message="Notes updated",
        data=group.model_dump(mode="json")
    )

@router.post("/groups/{group_id}/rsvp")
async def submit_rsvp(
    group_id: str,
    submission: RsvpSubmission,
    invitation_code: str = Depends(invitation_code_header),
    db: Session = Depends(get_db)
):
    """Submit the complete guest list for the invitation"""
    guests = RsvpService.reconcile(
        db,
        group_id=group_id,
        invitation_code=invitation_code,
        guests=submission.guests,
        additional_notes=submission.additional_notes
    )

    return success_response(
        message="Your RSVP has been submitted!",
        data=[_guest_data(guest) for guest in guests]
    )
