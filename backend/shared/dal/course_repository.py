"""Abstract interface for course template persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import CourseTemplate, GameVariant


class CourseTemplateRepository(ABC):
    """Templates are created and deleted, never edited in place."""

    @abstractmethod
    async def save_course_template(self, template: CourseTemplate) -> CourseTemplate: ...

    @abstractmethod
    async def list_course_templates(self, game_type: GameVariant) -> list[CourseTemplate]: ...

    @abstractmethod
    async def delete_course_template(self, template_id: str, rev: str) -> None: ...
