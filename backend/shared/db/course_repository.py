"""Course template repository on top of the document store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shared.dal.course_repository import CourseTemplateRepository
from shared.dal.models import COURSE_DOC_TYPE, CourseTemplate

if TYPE_CHECKING:
    from shared.dal.document_store import Document, DocumentStore
    from shared.dal.models import GameVariant

logger = structlog.get_logger()


def _from_document(doc: Document) -> CourseTemplate:
    body = {k: v for k, v in doc.items() if k not in ("_id", "_rev", "type")}
    return CourseTemplate.model_validate({**body, "id": doc["_id"], "rev": doc["_rev"]})


class DocumentCourseTemplateRepository(CourseTemplateRepository):
    """Stores templates beside games, told apart by `type: "course_template"`."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def save_course_template(self, template: CourseTemplate) -> CourseTemplate:
        """Persist a new template. Raises ValueError if its name is taken for the same game type."""
        if template.id is not None:
            raise ValueError(f"Course template '{template.name}' is already saved; delete and recreate it instead")

        existing = await self.list_course_templates(template.game_type)
        if any(t.name.casefold() == template.name.casefold() for t in existing):
            raise ValueError(f"Course '{template.name}' already exists for {template.game_type}")

        body = template.model_dump(mode="json", exclude={"id", "rev"})
        doc_id, rev = await self._store.post({**body, "type": COURSE_DOC_TYPE})
        logger.info("course template saved", template_id=doc_id, name=template.name, game_type=template.game_type)
        return template.model_copy(update={"id": doc_id, "rev": rev})

    async def list_course_templates(self, game_type: GameVariant) -> list[CourseTemplate]:
        docs = await self._store.all_docs()
        templates = [
            _from_document(doc)
            for doc in docs
            if doc.get("type") == COURSE_DOC_TYPE and doc.get("game_type") == game_type.value
        ]
        return sorted(templates, key=lambda t: t.name.casefold())

    async def delete_course_template(self, template_id: str, rev: str) -> None:
        await self._store.remove(template_id, rev)
        logger.info("course template deleted", template_id=template_id)
