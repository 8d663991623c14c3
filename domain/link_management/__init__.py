"""
Link Management Domain

Drop links: slug addressing, password protection, deadlines and the
storage credential they relay uploads to.
"""

from .entities import Link
from .repositories import LinkRepository
from .value_objects import FieldUpdate, UpdateKind

__all__ = [
    "Link",
    "LinkRepository",
    "FieldUpdate",
    "UpdateKind",
]
