"""
Center portal and admin portal I/O models.

These models use camelCase keys on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CenterRegistration(CamelModel):
    """Center portal registration / profile update body.

    Fields are optional so validation can report the documented messages.
    """

    email: Optional[str] = None
    password: Optional[str] = None
    contact_person: Optional[str] = None
    center_name: Optional[str] = None
    center_type: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    business_license: Optional[str] = None


class CenterLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class CenterUserRead(CamelModel):
    id: str
    email: str
    contact_person: str
    center_name: str
    center_type: str
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    description: Optional[str] = None
    business_license: Optional[str] = None
    is_verified: bool
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None


class CenterUserEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    user: CenterUserRead


class CenterSyncRequest(CamelModel):
    """Admin request to push one account (or, without an id, every active account) to the locator."""

    center_user_id: Optional[str] = None
    action: Literal["sync", "delete"] = "sync"


class CenterListingStatus(CamelModel):
    center_user_id: str
    center_name: str
    is_active: bool
    has_listing: bool


class CenterSyncStatus(CamelModel):
    total: int
    listed: int
    unlisted: int
    accounts: List[CenterListingStatus] = Field(default_factory=list)


class CenterSyncStats(CamelModel):
    total: int = 0
    synced: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0


class CenterSyncReport(CamelModel):
    success: bool = True
    message: str
    stats: CenterSyncStats
    errors: List[str] = Field(default_factory=list)


class AdminLogin(BaseModel):
    email: str
    password: str


class AdminToken(CamelModel):
    success: bool = True
    token: str
    expires_at: datetime


class AdminStats(CamelModel):
    total_users: int
    active_users: int
    new_this_month: int
    total_assessments: int
    total_locations: int
    user_growth: str = "0%"
    assessment_growth: str = "0%"
    location_growth: str = "0%"


class AdminAssessment(CamelModel):
    id: str
    child_id: str
    child_name: str
    parent_email: Optional[str] = None
    status: str
    score: Optional[int] = None
    risk_level: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None


class AdminAssessmentStats(CamelModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    low_risk: int = 0
    medium_risk: int = 0
    high_risk: int = 0


class AdminAssessmentList(CamelModel):
    assessments: List[AdminAssessment] = Field(default_factory=list)
    stats: AdminAssessmentStats


class AdminUser(CamelModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: datetime
    children_count: int = 0
    assessments_count: int = 0


class CenterUserModeration(CamelModel):
    is_verified: Optional[bool] = None
    is_active: Optional[bool] = None


class AdminAnalytics(CamelModel):
    total_children: int
    total_profiles: int
    total_assessments: int
    completed_assessments: int
    risk_distribution: Dict[str, int]
    assessments_by_month: Dict[str, int]
    centers_by_type: Dict[str, int]
