"""
Center portal account and session entities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class CenterUser(Base, table=True):
    """A treatment center's portal account.

    Table: center_users
    """

    __tablename__ = "center_users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    contact_person: str
    center_name: str
    center_type: str
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    description: Optional[str] = None
    business_license: Optional[str] = None
    is_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})
    last_login: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"CenterUser(id={self.id}, email={self.email})"


class CenterSession(Base, table=True):
    """An opaque login session of a center portal account.

    Table: center_sessions
    """

    __tablename__ = "center_sessions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    center_user_id: str = Field(foreign_key="center_users.id", index=True)
    session_token: str = Field(unique=True, index=True)
    expires_at: datetime = Field(sa_type=UTCDateTime, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"CenterSession(center_user_id={self.center_user_id}, expires_at={self.expires_at})"
