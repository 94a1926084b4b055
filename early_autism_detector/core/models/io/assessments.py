"""
Assessment and scoring I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from early_autism_detector.core.scoring import Answer, ScoreResult, ScoringQuestion


class AssessmentCreate(BaseModel):
    child_id: str = Field(description="Child being screened")
    notes: Optional[str] = None


class AssessmentRead(BaseModel):
    """Schema for reading an assessment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    child_id: str
    status: str
    score: Optional[int] = None
    risk_level: Optional[str] = None
    notes: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None


class ResponseUpsert(BaseModel):
    """One answer submitted during an assessment."""

    question_id: int = Field(description="Question number")
    answer: Literal["yes", "no"]
    notes: Optional[str] = None


class ResponseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: int
    answer: str
    notes: Optional[str] = None


class AssessmentDetail(AssessmentRead):
    """An assessment with its answers and, once completed, its interpretation."""

    responses: List[ResponseRead] = Field(default_factory=list)
    result: Optional[ScoreResult] = None


class ScoreRequest(BaseModel):
    """Stateless scoring request."""

    questions: List[ScoringQuestion]
    answers: List[Answer]
