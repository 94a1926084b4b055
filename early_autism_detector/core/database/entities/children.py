"""
Child profile entity.

Children belong to a parent (auth user) and are the subjects of assessments.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class Child(Base, table=True):
    """A child registered by a parent.

    Table: children
    """

    __tablename__ = "children"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    parent_id: str = Field(index=True, description="Auth user id of the parent")
    name: str
    date_of_birth: date
    gender: Optional[str] = Field(default=None, description="male, female or other")
    additional_notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Child(id={self.id}, name={self.name}, parent_id={self.parent_id})"
