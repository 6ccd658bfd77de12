"""
Repository layer: the queries the roster services share.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from rsvp.models import Guest, GuestGroup


# -------- Guest group repository --------

class GroupRepo:
    @staticmethod
    def get_by_id(db: Session, group_id: UUID) -> Optional[GuestGroup]:
        return db.query(GuestGroup).filter(GuestGroup.id == group_id).first()

    @staticmethod
    def get_by_credentials(db: Session, group_id: UUID, invitation_code: UUID) -> Optional[GuestGroup]:
        return db.query(GuestGroup).filter(
            GuestGroup.id == group_id,
            GuestGroup.invitation_code == invitation_code
        ).first()

    @staticmethod
    def get_by_invitation_code(db: Session, invitation_code: UUID) -> Optional[GuestGroup]:
        return db.query(GuestGroup).filter(GuestGroup.invitation_code == invitation_code).first()

    @staticmethod
    def lock(db: Session, group_id: UUID) -> Optional[GuestGroup]:
        """Load the group row with SELECT ... FOR UPDATE (held until commit/rollback)"""
        return db.query(GuestGroup).filter(GuestGroup.id == group_id).with_for_update().populate_existing().first()

    @staticmethod
    def list_with_counts(
        db: Session,
        search: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> Tuple[List[Tuple[GuestGroup, int]], int]:
        guest_count = func.count(Guest.id).label("guest_count")
        query = db.query(GuestGroup, guest_count).outerjoin(
            Guest, Guest.guest_group_id == GuestGroup.id
        ).group_by(GuestGroup.id)

        if search:
            query = query.filter(GuestGroup.name.ilike(f"%{search}%"))

        total = query.count()
        query = query.order_by(GuestGroup.name).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [(group, count) for group, count in query.all()], total

    @staticmethod
    def list_all(db: Session) -> List[GuestGroup]:
        return db.query(GuestGroup).order_by(GuestGroup.name).all()


# -------- Guest repository --------

class GuestRepo:
    @staticmethod
    def get_in_group(db: Session, guest_id: UUID, group_id: UUID) -> Optional[Guest]:
        return db.query(Guest).filter(
            Guest.id == guest_id,
            Guest.guest_group_id == group_id
        ).first()

    @staticmethod
    def get_by_id(db: Session, guest_id: UUID) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.id == guest_id).first()

    @staticmethod
    def list_for_group(db: Session, group_id: UUID) -> List[Guest]:
        return db.query(Guest).filter(Guest.guest_group_id == group_id).order_by(Guest.created_at, Guest.name).all()

    @staticmethod
    def list_for_group_by_name(db: Session, group_id: UUID) -> List[Guest]:
        return db.query(Guest).filter(Guest.guest_group_id == group_id).order_by(Guest.name).all()

    @staticmethod
    def count_for_group(db: Session, group_id: UUID) -> int:
        return db.query(func.count(Guest.id)).filter(Guest.guest_group_id == group_id).scalar()

    @staticmethod
    def list_all(db: Session) -> List[Guest]:
        return db.query(Guest).order_by(Guest.guest_group_id, Guest.created_at).all()

    @staticmethod
    def list_self_added_not_in(db: Session, group_id: UUID, keep_ids: Iterable[UUID]) -> List[Guest]:
        return db.query(Guest).filter(
            Guest.guest_group_id == group_id,
            Guest.self_added == True,  # noqa: E712
            ~Guest.id.in_(list(keep_ids))
        ).all()
