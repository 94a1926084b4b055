"""
Treatment center I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AutismCenterRead(BaseModel):
    """Schema for reading a treatment center."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    contact_person: Optional[str] = None
    services: List[str] = Field(default_factory=list)
    age_groups: List[str] = Field(default_factory=list)
    insurance_accepted: List[str] = Field(default_factory=list)
    rating: Optional[float] = None
    verified: bool = False
    center_user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NearbyCenter(AutismCenterRead):
    distance: float = Field(description="Distance from the search origin in km")


class AutismCenterCreate(BaseModel):
    """Body for adding a center. Required fields are checked by the endpoint."""

    name: Optional[str] = None
    type: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    contact_person: Optional[str] = None
    services: List[str] = Field(default_factory=list)
    age_groups: List[str] = Field(default_factory=list)
    insurance_accepted: List[str] = Field(default_factory=list)
    rating: Optional[float] = None


class AutismCenterUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    services: Optional[List[str]] = None
    age_groups: Optional[List[str]] = None
    insurance_accepted: Optional[List[str]] = None
    rating: Optional[float] = None
    verified: Optional[bool] = None


class CenterStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    by_type: Dict[str, int] = Field(alias="byType")
    verified: int
    unverified: int
