"""Scorekeeper configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from shared.dal.models import DEFAULT_HOLE_COUNT, DEFAULT_PAR, MAX_PHASE10_ROUNDS


class TallySettings(BaseSettings):
    model_config = {"env_prefix": "TALLY_"}

    # SQLite file behind the document store; ":memory:" for throwaway stores
    database_path: str = Field(default="backend/data/tallypad.db", min_length=1)
    log_dir: str | None = None

    max_phase10_rounds: int = Field(default=MAX_PHASE10_ROUNDS, ge=1, le=MAX_PHASE10_ROUNDS)
    default_hole_count: int = Field(default=DEFAULT_HOLE_COUNT, ge=1, le=36)
    default_par: int = Field(default=DEFAULT_PAR, ge=1)
