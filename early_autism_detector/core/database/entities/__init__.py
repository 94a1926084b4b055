"""
Database entity models.

Modules:
- profiles: Parent profiles (mirroring hosted auth users)
- children: Child profiles
- assessments: Screening assessments and their responses
- questionnaire: Screening questions and scoring ranges
- autism_centers: Treatment centers shown in the locator
- center_users: Center portal accounts and sessions
- saved_locations: Locations bookmarked by parents
- chat_history: Chat assistant exchanges
"""

from . import (
    assessments,
    autism_centers,
    center_users,
    chat_history,
    children,
    profiles,
    questionnaire,
    saved_locations,
)

__all__ = [
    "assessments",
    "autism_centers",
    "center_users",
    "chat_history",
    "children",
    "profiles",
    "questionnaire",
    "saved_locations",
]
