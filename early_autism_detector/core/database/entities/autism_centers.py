"""
Treatment center entity.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class CenterType(str, Enum):
    """Kind of service a center provides."""

    DIAGNOSTIC = "diagnostic"
    THERAPY = "therapy"
    SUPPORT = "support"
    EDUCATION = "education"


class AutismCenter(Base, table=True):
    """A treatment center listed in the locator.

    Table: autism_centers
    """

    __tablename__ = "autism_centers"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    center_user_id: Optional[str] = Field(default=None, index=True, description="Owning center portal account")
    name: str = Field(index=True)
    type: str = Field(index=True)
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    contact_person: Optional[str] = None
    services: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    age_groups: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    insurance_accepted: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    rating: Optional[float] = None
    verified: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"AutismCenter(id={self.id}, name={self.name}, type={self.type})"
