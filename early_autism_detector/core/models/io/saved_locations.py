"""
Saved location I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SavedLocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    type: str
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class SavedLocationCreate(BaseModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    address: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    phone: Optional[str] = None
    notes: Optional[str] = None


class SavedLocationUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    phone: Optional[str] = None
    notes: Optional[str] = None
