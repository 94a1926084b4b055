"""
Database repository layer using SQLModel.

Each module provides data access operations for its corresponding entity
models on top of the generic ``BaseRepository``.

Modules:
- base: BaseRepository and QueryBuilder utilities
- assessments: Assessments and responses
- autism_centers: Treatment centers
- center_users: Center portal accounts and sessions
- chat_history: Chat assistant exchanges
- children: Child profiles
- profiles: Parent profiles
- questionnaire: Questions and scoring ranges
- saved_locations: Saved locations
"""

from .assessments import AssessmentRepository
from .autism_centers import AutismCenterRepository
from .base import BaseRepository, QueryBuilder
from .center_users import CenterUserRepository
from .chat_history import ChatHistoryRepository
from .children import ChildRepository
from .profiles import ProfileRepository
from .questionnaire import QuestionnaireRepository
from .saved_locations import SavedLocationRepository

__all__ = [
    "AssessmentRepository",
    "AutismCenterRepository",
    "BaseRepository",
    "CenterUserRepository",
    "ChatHistoryRepository",
    "ChildRepository",
    "ProfileRepository",
    "QueryBuilder",
    "QuestionnaireRepository",
    "SavedLocationRepository",
]
