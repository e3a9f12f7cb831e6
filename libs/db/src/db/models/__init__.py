"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the transaction table used by ``expense_tracker``.
"""

from .expenses import CATEGORY_MAX_LENGTH, NOTE_MAX_LENGTH, Base, EtTransaction

__all__ = [
    "Base",
    "EtTransaction",
    "CATEGORY_MAX_LENGTH",
    "NOTE_MAX_LENGTH",
]
