"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from visual_notes.boundary.db.CRUD import user_crud, usage_crud

    user = await user_crud.get_by_token_hash(db, token_hash)
"""

from visual_notes.boundary.db.CRUD.base_crud import BaseCRUD
from visual_notes.boundary.db.CRUD.reservation_crud import ReservationCRUD, reservation_crud
from visual_notes.boundary.db.CRUD.usage_crud import UsageCRUD, usage_crud
from visual_notes.boundary.db.CRUD.user_crud import UserCRUD, user_crud

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "UsageCRUD",
    "usage_crud",
    "ReservationCRUD",
    "reservation_crud",
]
