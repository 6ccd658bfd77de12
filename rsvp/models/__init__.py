"""
Database models package
"""

from .guest_group import GuestGroup
from .guest import Guest

__all__ = ["GuestGroup", "Guest"]
