"""Database persistence infrastructure.

- Base model and UTC column type
- Database connection and session management
- SQLAlchemy models and repository implementations
"""

from authority.infrastructure.persistence.base import BaseModel, UTCDateTime
from authority.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
    "UTCDateTime",
]
