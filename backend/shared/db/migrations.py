"""Schema versioning for the document store.

The applied schema version lives in the `_local/version` document. On
startup `migrate` brings the stored documents up to SCHEMA_VERSION by
running each registered step in ascending order and only then records the
new version, so a failed run is retried from the same point next time.
Steps therefore have to tolerate partially migrated data.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from shared.dal.models import GAME_DOC_TYPE, VersionRecord
from shared.db.exceptions import MigrationError, NotFoundError

if TYPE_CHECKING:
    from shared.dal.document_store import DocumentStore

logger = structlog.get_logger()

SCHEMA_VERSION = 2
VERSION_DOC_ID = "_local/version"

MigrationStep = Callable[["DocumentStore"], Awaitable[int]]

# "October 19, 2026" is what the setup flow writes; the others come from older builds.
_CREATED_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%m/%d/%Y")


def parse_created_date(value: object) -> int | None:
    """Convert a human-readable creation date to epoch milliseconds (UTC midnight)."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    for fmt in _CREATED_DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
        return int(parsed.timestamp() * 1000)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp() * 1000)


async def add_last_played_at(store: DocumentStore) -> int:
    """Version 2: derive `last_played_at` from the creation date of every game.

    Untyped documents predate course templates and are games; they get their
    `type` stamped on the way through, and their old `date` field is moved to
    `created_date`.
    """
    updated = []
    for doc in await store.all_docs():
        if doc.get("type", GAME_DOC_TYPE) != GAME_DOC_TYPE:
            continue
        doc = dict(doc)
        legacy_date = doc.pop("date", None)
        if legacy_date is not None:
            doc.setdefault("created_date", legacy_date)
        raw_date = doc.get("created_date")
        last_played_at = parse_created_date(raw_date)
        if last_played_at is None:
            logger.warning("unparseable creation date, using 0", doc_id=doc["_id"], created_date=raw_date)
            last_played_at = 0
        updated.append({**doc, "type": GAME_DOC_TYPE, "last_played_at": last_played_at})
    await store.bulk_put(updated)
    return len(updated)


MIGRATIONS: dict[int, MigrationStep] = {
    2: add_last_played_at,
}


async def read_schema_version(store: DocumentStore) -> int | None:
    """Return the applied schema version, or None for a store that was never initialised."""
    try:
        doc = await store.get(VERSION_DOC_ID)
    except NotFoundError:
        return None
    return VersionRecord.model_validate(doc).version


async def migrate(
    store: DocumentStore,
    *,
    target: int = SCHEMA_VERSION,
    steps: Mapping[int, MigrationStep] | None = None,
) -> int:
    """Bring the store to `target` and return the version it ends up at.

    A store without a version record is treated as fresh: it is stamped with
    `target` and no step runs. A store already ahead of `target` is left
    untouched. Step failures raise MigrationError and leave the version
    record as it was.
    """
    if steps is None:
        steps = MIGRATIONS

    try:
        version_doc = await store.get(VERSION_DOC_ID)
    except NotFoundError:
        await store.put({"_id": VERSION_DOC_ID, **VersionRecord(version=target).model_dump()})
        logger.info("initialised document store", version=target)
        return target

    current = VersionRecord.model_validate(version_doc).version
    if current == target:
        return current
    if current > target:
        logger.warning("document store is newer than this build", stored_version=current, code_version=target)
        return current

    logger.info("migrating document store", from_version=current, to_version=target)
    for version in range(current + 1, target + 1):
        step = steps.get(version)
        if step is None:
            continue
        try:
            count = await step(store)
        except Exception as exc:
            logger.exception("migration step failed", version=version)
            raise MigrationError(version, str(exc)) from exc
        logger.info("applied migration", version=version, documents=count)

    await store.put({**version_doc, "version": target})
    logger.info("document store migrated", version=target)
    return target
