"""
Roster export to Excel and CSV
"""

import io
from typing import Dict, List

import pandas as pd
from sqlalchemy.orm import Session

from rsvp.models import Guest, GuestGroup
from rsvp.services.repositories import GroupRepo, GuestRepo

AGE_CATEGORY_LABELS = {
    "adult": "Adult",
    "child_under_3": "Child (< 3 years)",
    "child_under_10": "Child (< 10 years)",
}

GROUP_COLUMNS = [
    "id", "name", "email", "invitation_code", "party_size",
    "locations", "default_language", "additional_notes",
]

GUEST_COLUMNS = [
    "id", "guest_group_id", "guest_group_name", "name", "attending_locations", "age_category",
    "vegetarian", "vegan", "halal", "no_pork", "gluten_free", "other_dietary",
]

class ExportService:
    """Service for exporting groups and guests"""

    @staticmethod
    def groups_frame(groups: List[GuestGroup]) -> pd.DataFrame:
        rows = [
            {
                "id": str(group.id),
                "name": group.name,
                "email": group.email or "",
                "invitation_code": str(group.invitation_code),
                "party_size": group.party_size,
                "locations": "; ".join(group.locations or []),
                "default_language": group.default_language,
                "additional_notes": group.additional_notes or "",
            }
            for group in groups
        ]
        return pd.DataFrame(rows, columns=GROUP_COLUMNS)

    @staticmethod
    def guests_frame(guests: List[Guest], group_names: Dict[str, str]) -> pd.DataFrame:
        rows = []
        for guest in guests:
            prefs = guest.dietary_preferences or {}
            rows.append({
                "id": str(guest.id),
                "guest_group_id": str(guest.guest_group_id),
                "guest_group_name": group_names.get(str(guest.guest_group_id), "Unknown"),
                "name": guest.name,
                "attending_locations": "; ".join(guest.attending_locations or []),
                "age_category": AGE_CATEGORY_LABELS.get(guest.age_category, guest.age_category),
                "vegetarian": bool(prefs.get("vegetarian")),
                "vegan": bool(prefs.get("vegan")),
                "halal": bool(prefs.get("halal")),
                "no_pork": bool(prefs.get("no_pork")),
                "gluten_free": bool(prefs.get("gluten_free")),
                "other_dietary": prefs.get("other") or "",
            })
        return pd.DataFrame(rows, columns=GUEST_COLUMNS)

    @staticmethod
    def to_excel(df: pd.DataFrame, sheet_name: str) -> bytes:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        return buffer.getvalue()

    @staticmethod
    def to_csv(df: pd.DataFrame) -> bytes:
        # BOM so spreadsheet programs detect UTF-8
        return df.to_csv(index=False).encode("utf-8-sig")

    @staticmethod
    def export_groups(db: Session, fmt: str = "xlsx") -> bytes:
        """Export every guest group (admin only: includes invitation codes)"""
        df = ExportService.groups_frame(GroupRepo.list_all(db))
        if fmt == "csv":
            return ExportService.to_csv(df)
        return ExportService.to_excel(df, sheet_name="Guest Groups")

    @staticmethod
    def export_guests(db: Session, fmt: str = "xlsx") -> bytes:
        """Export every guest with its group name and dietary flags"""
        group_names = {str(group.id): group.name for group in GroupRepo.list_all(db)}
        df = ExportService.guests_frame(GuestRepo.list_all(db), group_names)
        if fmt == "csv":
            return ExportService.to_csv(df)
        return ExportService.to_excel(df, sheet_name="Guests")

