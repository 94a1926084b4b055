"""
Saved location entity: places a parent bookmarked in the locator.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class SavedLocation(Base, table=True):
    """Table: saved_locations"""

    __tablename__ = "saved_locations"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    name: str
    type: str
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)

    def __repr__(self) -> str:
        return f"SavedLocation(id={self.id}, name={self.name})"
