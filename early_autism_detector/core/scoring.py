"""
M-CHAT-R scoring.

Pure functions for scoring the Modified Checklist for Autism in Toddlers, Revised.
For questions 2, 5 and 12 a "yes" answer indicates risk; for every other question
a "no" answer does. The total is the count of risk-indicating answers and maps to
a risk category through closed score intervals.

This module also carries the default instrument (20 questions) and the default
scoring ranges used to seed the database.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

RISK_IF_YES = frozenset({2, 5, 12})
MAX_SCORE = 20


class AnswerValue(str, Enum):
    """A parent's answer to a screening question."""

    YES = "yes"
    NO = "no"


class QuestionCategory(str, Enum):
    """Domain a screening question covers."""

    SOCIAL_COMMUNICATION = "social_communication"
    BEHAVIOR_SENSORY = "behavior_sensory"


class ScoringQuestion(BaseModel):
    """Minimal question shape needed for scoring."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Question identifier (M-CHAT-R item number)")
    text: Optional[str] = None


class Answer(BaseModel):
    """A yes/no answer keyed by question identifier."""

    question_id: int
    answer: Literal["yes", "no"]


class ScoringRange(BaseModel):
    """A closed score interval and its interpretation."""

    model_config = ConfigDict(from_attributes=True)

    min_score: int
    max_score: int
    percentage_range: str
    risk_category: str
    interpretation: str

    def contains(self, score: int) -> bool:
        return self.min_score <= score <= self.max_score


class ScoreResult(BaseModel):
    """Outcome of scoring one set of answers."""

    score: int
    max_score: int
    percentage: float
    risk_category: str
    percentage_range: str
    interpretation: str
    answered: int
    unanswered: int


SCORING_RANGES: List[ScoringRange] = [
    ScoringRange(
        min_score=0,
        max_score=2,
        percentage_range="0-10%",
        risk_category="Low Risk",
        interpretation="No action needed (rescreen after 24 months if <24 months old)",
    ),
    ScoringRange(
        min_score=3,
        max_score=7,
        percentage_range="15-35%",
        risk_category="Medium Risk",
        interpretation="Administer M-CHAT-R Follow-Up interview",
    ),
    ScoringRange(
        min_score=8,
        max_score=20,
        percentage_range="40-100%",
        risk_category="High Risk",
        interpretation="Immediate referral for autism evaluation and early intervention",
    ),
]


class DefaultQuestion(BaseModel):
    question_number: int
    text: str
    category: QuestionCategory
    risk_answer: AnswerValue


def _q(number: int, text: str, category: QuestionCategory) -> DefaultQuestion:
    risk = AnswerValue.YES if number in RISK_IF_YES else AnswerValue.NO
    return DefaultQuestion(question_number=number, text=text, category=category, risk_answer=risk)


_SC = QuestionCategory.SOCIAL_COMMUNICATION
_BS = QuestionCategory.BEHAVIOR_SENSORY

DEFAULT_QUESTIONS: List[DefaultQuestion] = [
    _q(1, "If you point at something across the room, does your child look at it?", _SC),
    _q(2, "Have you ever wondered if your child is deaf?", _BS),
    _q(3, "Does your child play pretend or make-believe?", _SC),
    _q(4, "Does your child like climbing on things?", _BS),
    _q(5, "Does your child make unusual finger movements near his or her eyes?", _BS),
    _q(6, "Does your child point with one finger to ask for something or to get help?", _SC),
    _q(7, "Does your child point with one finger to show you something interesting?", _SC),
    _q(8, "Is your child interested in other children?", _SC),
    _q(9, "Does your child show you things by bringing them to you or holding them up for you to see?", _SC),
    _q(10, "Does your child respond when you call his or her name?", _SC),
    _q(11, "When you smile at your child, does he or she smile back at you?", _SC),
    _q(12, "Does your child get upset by everyday noises?", _BS),
    _q(13, "Does your child walk?", _BS),
    _q(14, "Does your child look you in the eye when you are talking to him or her?", _SC),
    _q(15, "Does your child try to copy what you do?", _SC),
    _q(16, "If you turn your head to look at something, does your child look around to see what you are looking at?", _SC),
    _q(17, "Does your child try to get you to watch him or her?", _SC),
    _q(18, "Does your child understand when you tell him or her to do something?", _SC),
    _q(19, "If something new happens, does your child look at your face to see how you feel about it?", _SC),
    _q(20, "Does your child like movement activities?", _BS),
]


def is_risk_answer(question_id: int, answer: str) -> bool:
    """Return True when ``answer`` to ``question_id`` indicates risk."""
    if question_id in RISK_IF_YES:
        return answer == AnswerValue.YES.value
    return answer == AnswerValue.NO.value


def _latest_answers(answers: Iterable[Answer]) -> dict[int, str]:
    # Later answers to the same question replace earlier ones.
    latest: dict[int, str] = {}
    for item in answers:
        latest[item.question_id] = item.answer
    return latest


def calculate_score(questions: Iterable[ScoringQuestion], answers: Iterable[Answer]) -> int:
    """
    Count the risk-indicating answers.

    Answers to question ids absent from ``questions`` contribute nothing, so the
    result is always within ``[0, len(questions)]``.

    Args:
        questions: Questions of the instrument being scored
        answers: Yes/no answers keyed by question id

    Returns:
        The total risk score
    """
    known = {question.id for question in questions}
    return sum(
        1
        for question_id, answer in _latest_answers(answers).items()
        if question_id in known and is_risk_answer(question_id, answer)
    )


def get_scoring_range(score: int, ranges: Optional[Sequence[ScoringRange]] = None) -> ScoringRange:
    """
    Map a score to its configured interval.

    Falls back to the last configured interval when no interval contains ``score``.

    Raises:
        ValueError: If ``ranges`` is empty
    """
    ranges = SCORING_RANGES if ranges is None else ranges
    if not ranges:
        raise ValueError("At least one scoring range is required")
    for scoring_range in ranges:
        if scoring_range.contains(score):
            return scoring_range
    return ranges[-1]


def get_score_percentage(score: int, max_score: int = MAX_SCORE) -> float:
    return score / max_score * 100


def score_assessment(
    questions: Sequence[ScoringQuestion],
    answers: Iterable[Answer],
    ranges: Optional[Sequence[ScoringRange]] = None,
) -> ScoreResult:
    """Score answers against ``questions`` and interpret the result."""
    answers = list(answers)
    known = {question.id for question in questions}
    answered = len(known.intersection(_latest_answers(answers)))
    score = calculate_score(questions, answers)
    max_score = len(questions) or MAX_SCORE
    matched = get_scoring_range(score, ranges)
    return ScoreResult(
        score=score,
        max_score=max_score,
        percentage=round(get_score_percentage(score, max_score), 2),
        risk_category=matched.risk_category,
        percentage_range=matched.percentage_range,
        interpretation=matched.interpretation,
        answered=answered,
        unanswered=len(known) - answered,
    )


def stored_result(
    score: int,
    risk_category: str,
    answered: int,
    ranges: Optional[Sequence[ScoringRange]] = None,
    max_score: int = MAX_SCORE,
) -> ScoreResult:
    """
    Interpret a score recorded at completion time.

    The stored risk category is kept as-is; only its wording is looked up, so
    later edits to the questionnaire do not change a finished result.
    """
    ranges = SCORING_RANGES if ranges is None else ranges
    matched = next(
        (scoring_range for scoring_range in ranges if scoring_range.risk_category == risk_category),
        None,
    ) or get_scoring_range(score, ranges)
    return ScoreResult(
        score=score,
        max_score=max_score,
        percentage=round(get_score_percentage(score, max_score), 2),
        risk_category=risk_category,
        percentage_range=matched.percentage_range,
        interpretation=matched.interpretation,
        answered=answered,
        unanswered=max(max_score - answered, 0),
    )
