"""
Questionnaire configuration entities: questions and scoring ranges.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class QuestionnaireQuestion(Base, table=True):
    """A screening question.

    Table: questionnaire_questions
    """

    __tablename__ = "questionnaire_questions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    question_number: int = Field(unique=True, index=True)
    text: str
    category: str = Field(description="social_communication or behavior_sensory")
    risk_answer: str = Field(description="Answer that indicates risk: yes or no")
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"QuestionnaireQuestion(number={self.question_number}, risk_answer={self.risk_answer})"


class ScoringRangeRecord(Base, table=True):
    """A configured score interval.

    Table: scoring_ranges
    """

    __tablename__ = "scoring_ranges"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    min_score: int
    max_score: int
    percentage_range: str
    risk_category: str
    interpretation: str

    def __repr__(self) -> str:
        return f"ScoringRangeRecord({self.min_score}-{self.max_score}, {self.risk_category})"
