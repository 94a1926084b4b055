"""
Child profile I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Gender = Literal["male", "female", "other"]


class ChildRead(BaseModel):
    """Schema for reading a child profile."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    parent_id: str
    name: str
    date_of_birth: date
    gender: Optional[str] = None
    additional_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ChildCreate(BaseModel):
    """Schema for creating a child profile.

    ``name`` and ``date_of_birth`` are checked by the endpoint so that a missing
    value produces the documented error message.
    """

    name: Optional[str] = Field(default=None, description="Child's name")
    date_of_birth: Optional[date] = Field(default=None, description="Date of birth (YYYY-MM-DD)")
    gender: Optional[Gender] = None
    additional_notes: Optional[str] = None


class ChildUpdate(BaseModel):
    """Schema for updating a child profile."""

    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    additional_notes: Optional[str] = None


class ChildDeleteResult(BaseModel):
    success: bool
    message: str
