"""
Questionnaire I/O models.

``QuestionRead`` is the parent-facing view; ``AdminQuestion*`` models are the
camelCase admin portal contract.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class QuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_number: int
    text: str
    category: str
    risk_answer: str


class AdminQuestionRead(BaseModel):
    """Admin view of a question (serialized with camelCase keys)."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    question_number: int
    text: str
    category: str
    risk_answer: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AdminQuestionWrite(BaseModel):
    """Body for creating or updating a question.

    Fields are optional so the endpoint can report which required field is missing.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: Optional[str] = None
    category: Optional[str] = None
    risk_answer: Optional[str] = None
    is_active: Optional[bool] = None


class AdminQuestionEnvelope(BaseModel):
    success: bool = True
    question: AdminQuestionRead


class AdminQuestionListEnvelope(BaseModel):
    success: bool = True
    questions: List[AdminQuestionRead] = Field(default_factory=list)
