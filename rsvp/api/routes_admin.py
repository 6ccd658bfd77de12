"""
Admin API routes - requires authentication
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from rsvp.core.db import get_db
from rsvp.core.errors import NotFound
from rsvp.schemas.group import GuestGroupCreate, GuestGroupUpdate, GuestGroupAdmin
from rsvp.schemas.guest import GuestEntry, GuestUpdate, GuestResponse
from rsvp.services.admin_service import AdminService
from rsvp.services.export_service import ExportService
from rsvp.services.qr_service import QRService
from rsvp.services.repositories import GuestRepo
from rsvp.utils.security import verify_admin_token
from rsvp.utils.responses import success_response

router = APIRouter()

EXPORT_MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv; charset=utf-8",
}

def _group_data(group, guest_count: int) -> dict:
    admin_view = GuestGroupAdmin.model_validate(group)
    admin_view.guest_count = guest_count
    return admin_view.model_dump(mode="json")

def _guest_data(guest) -> dict:
    return GuestResponse.model_validate(guest).model_dump(mode="json")

# -------- Guest groups --------

@router.get("/groups")
async def list_groups(
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """List guest groups with their guest counts"""
    rows, total = AdminService.list_groups(db, search=search, page=page, per_page=per_page)

    return success_response(
        message=f"Found {total} guest groups",
        data={
            "groups": [_group_data(group, count) for group, count in rows],
            "total": total,
            "page": page,
            "per_page": per_page
        }
    )

@router.post("/groups")
async def create_group(
    group_data: GuestGroupCreate,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Create a guest group with a fresh invitation code"""
    group = AdminService.create_group(db, group_data, admin_email)

    return success_response(
        message="Guest group created successfully",
        data=_group_data(group, 0),
        status_code=201
    )

@router.get("/groups/{group_id}")
async def get_group(
    group_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Get one guest group with its guests"""
    group = AdminService.get_group(db, group_id)
    guests = GuestRepo.list_for_group(db, group.id)

    data = _group_data(group, len(guests))
    data["guests"] = [_guest_data(guest) for guest in guests]

    return success_response(message="Guest group retrieved successfully", data=data)

@router.patch("/groups/{group_id}")
async def update_group(
    group_id: str,
    group_data: GuestGroupUpdate,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Update guest group fields"""
    group = AdminService.update_group(db, group_id, group_data)

    return success_response(
        message="Guest group updated successfully",
        data=_group_data(group, GuestRepo.count_for_group(db, group.id))
    )

@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Delete a guest group and all of its guests"""
    deleted_id = AdminService.delete_group(db, group_id)

    return success_response(
        message="Guest group deleted successfully",
        data={"deleted_group_id": str(deleted_id)}
    )

@router.get("/groups/{group_id}/qr.png")
async def get_group_qr(
    group_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """QR code linking to the group's invitation page"""
    group = AdminService.get_group(db, group_id)
    qr_bytes = QRService.generate_invitation_qr(str(group.invitation_code))

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=invitation_{group.id}.png"}
    )

# -------- Guests --------

@router.get("/groups/{group_id}/guests")
async def list_group_guests(
    group_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """List the guests of a group"""
    guests = AdminService.list_group_guests(db, group_id)

    return success_response(
        message=f"Found {len(guests)} guests",
        data=[_guest_data(guest) for guest in guests]
    )

@router.post("/groups/{group_id}/guests")
async def create_guest(
    group_id: str,
    entry: GuestEntry,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Add a guest to a group on the organizers' behalf"""
    guest = AdminService.create_guest(db, group_id, entry)

    return success_response(
        message="Guest created successfully",
        data=_guest_data(guest),
        status_code=201
    )

@router.patch("/guests/{guest_id}")
async def update_guest(
    guest_id: str,
    guest_update: GuestUpdate,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Update guest information"""
    guest = AdminService.update_guest(db, guest_id, guest_update)

    return success_response(
        message="Guest updated successfully",
        data=_guest_data(guest)
    )

@router.delete("/guests/{guest_id}")
async def delete_guest(
    guest_id: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Delete any guest, including organizer-entered ones"""
    deleted_id = AdminService.delete_guest(db, guest_id)

    return success_response(
        message="Guest deleted successfully",
        data={"deleted_guest_id": str(deleted_id)}
    )

@router.get("/locations/{location}/guests")
async def guests_for_location(
    location: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Every guest attending a location"""
    guests = AdminService.guests_for_location(db, location)

    return success_response(
        message=f"Found {len(guests)} guests attending {location}",
        data=[_guest_data(guest) for guest in guests]
    )

# -------- Dashboard and exports --------

@router.get("/stats")
async def get_stats(
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """RSVP statistics"""
    stats = AdminService.get_stats(db)

    return success_response(message="Statistics retrieved", data=stats.model_dump())

@router.get("/export/groups.{fmt}")
async def export_groups(
    fmt: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Export every guest group"""
    if fmt not in EXPORT_MEDIA_TYPES:
        raise NotFound("Export format")

    return Response(
        content=ExportService.export_groups(db, fmt=fmt),
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename=guest_groups.{fmt}"}
    )

@router.get("/export/guests.{fmt}")
async def export_guests(
    fmt: str,
    db: Session = Depends(get_db),
    admin_email: str = Depends(verify_admin_token)
):
    """Export every guest"""
    if fmt not in EXPORT_MEDIA_TYPES:
        raise NotFound("Export format")

    return Response(
        content=ExportService.export_guests(db, fmt=fmt),
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename=guests.{fmt}"}
    )
