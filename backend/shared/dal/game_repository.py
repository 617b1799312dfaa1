"""Abstract interface for game persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shared.dal.models import Game, GameDraft


class GameRepository(ABC):
    """Typed CRUD over Game documents.

    Writes follow read-modify-write with revision tokens: a stale revision
    raises ConflictError and is never merged or retried here.
    """

    @abstractmethod
    async def create_game(self, draft: GameDraft, *, now_ms: int | None = None) -> Game: ...

    @abstractmethod
    async def get_game(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def list_games(self) -> list[Game]:
        """All games, most recently played first."""

    @abstractmethod
    async def update_game(
        self,
        game_id: str,
        changes: dict[str, Any],
        *,
        expected_rev: str | None = None,
    ) -> str:
        """Shallow-merge `changes` over the stored game and return the new revision."""

    @abstractmethod
    async def delete_game(self, game_id: str, rev: str) -> None: ...

    @abstractmethod
    async def clear_all(self) -> None:
        """Destroy the whole store, games and everything else in it."""
