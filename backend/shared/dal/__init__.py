"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.course_repository import CourseTemplateRepository
from shared.dal.document_store import DocumentStore
from shared.dal.game_repository import GameRepository
from shared.dal.models import (
    CategoryScore,
    CourseTemplate,
    Game,
    GameDraft,
    GameStatus,
    GameVariant,
    GolfEntries,
    GolfHole,
    Phase10Entry,
    SimpleEntries,
    YahtzeeCategory,
    YahtzeeEntries,
)

__all__ = [
    "CategoryScore",
    "CourseTemplate",
    "CourseTemplateRepository",
    "DocumentStore",
    "Game",
    "GameDraft",
    "GameRepository",
    "GameStatus",
    "GameVariant",
    "GolfEntries",
    "GolfHole",
    "Phase10Entry",
    "SimpleEntries",
    "YahtzeeCategory",
    "YahtzeeEntries",
]
