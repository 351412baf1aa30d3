"""
Database models package.

Exports:
  - UserModel: Account row (identity and subscription state)
  - UsageRecordModel: One row per successful free-tier generation
  - QuotaReservationModel: In-flight hold on one unit of allowance

Dependencies: sqlalchemy, visual_notes.boundary.db.base
System role: Database model definitions for domain entities
"""

from visual_notes.boundary.db.models.quota_reservation_model import QuotaReservationModel
from visual_notes.boundary.db.models.usage_record_model import UsageRecordModel
from visual_notes.boundary.db.models.user_model import UserModel

__all__ = [
    "UserModel",
    "UsageRecordModel",
    "QuotaReservationModel",
]
