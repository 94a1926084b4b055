"""
Assessment entities.

An assessment is one M-CHAT-R screening of a child; its responses hold
one yes/no answer per question number.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class AssessmentStatus(str, Enum):
    """Lifecycle status of an assessment."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Assessment(Base, table=True):
    """One screening of a child.

    Table: assessments
    """

    __tablename__ = "assessments"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    child_id: str = Field(foreign_key="children.id", index=True)
    status: str = Field(default=AssessmentStatus.IN_PROGRESS.value, index=True)
    score: Optional[int] = Field(default=None)
    risk_level: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)

    started_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Assessment(id={self.id}, child_id={self.child_id}, status={self.status})"


class AssessmentResponse(Base, table=True):
    """Answer to a single question within an assessment.

    Table: responses
    """

    __tablename__ = "responses"
    __table_args__ = (
        UniqueConstraint("assessment_id", "question_id", name="uq_responses_assessment_question"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    assessment_id: str = Field(foreign_key="assessments.id", index=True)
    question_id: int = Field(description="Question number")
    answer: str = Field(description="yes or no")
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"AssessmentResponse(assessment_id={self.assessment_id}, question_id={self.question_id})"
