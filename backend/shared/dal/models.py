"""Persistence models for games, course templates and the schema version record."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal, Self

from pydantic import BaseModel, Field, model_validator

GAME_DOC_TYPE = "game"
COURSE_DOC_TYPE = "course_template"

MAX_PHASE10_ROUNDS = 25
DEFAULT_HOLE_COUNT = 9
DEFAULT_PAR = 3


class GameVariant(StrEnum):
    SIMPLE = "simple"
    YAHTZEE = "yahtzee"
    PHASE10 = "phase10"
    GOLF = "golf"
    PUTT_PUTT = "putt_putt"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_golf(self) -> bool:
        return self in (GameVariant.GOLF, GameVariant.PUTT_PUTT)


_DISPLAY_NAMES = {
    GameVariant.SIMPLE: "Simple Score",
    GameVariant.YAHTZEE: "Yahtzee",
    GameVariant.PHASE10: "Phase 10",
    GameVariant.GOLF: "Golf",
    GameVariant.PUTT_PUTT: "Putt-Putt",
}


class GameStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class YahtzeeCategory(StrEnum):
    ACES = "aces"
    TWOS = "twos"
    THREES = "threes"
    FOURS = "fours"
    FIVES = "fives"
    SIXES = "sixes"
    THREE_OF_A_KIND = "three_of_a_kind"
    FOUR_OF_A_KIND = "four_of_a_kind"
    FULL_HOUSE = "full_house"
    SMALL_STRAIGHT = "small_straight"
    LARGE_STRAIGHT = "large_straight"
    YAHTZEE = "yahtzee"
    CHANCE = "chance"
    YAHTZEE_BONUS = "yahtzee_bonus"  # value is a count of bonus Yahtzees, not points


class EntryState(StrEnum):
    UNSET = "unset"
    VALUE = "value"
    SCRATCHED = "scratched"


class CategoryScore(BaseModel, frozen=True):
    """A Yahtzee box: empty, holding a number, or scratched (forfeited)."""

    state: EntryState = EntryState.UNSET
    value: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _value_only_when_set(self) -> Self:
        if self.state != EntryState.VALUE and self.value != 0:
            raise ValueError(f"A {self.state} entry cannot carry a value")
        return self

    @classmethod
    def of(cls, value: int) -> CategoryScore:
        return cls(state=EntryState.VALUE, value=value)

    @classmethod
    def scratched(cls) -> CategoryScore:
        return cls(state=EntryState.SCRATCHED)

    @property
    def points(self) -> int:
        """Scratched and unset boxes both score nothing."""
        return self.value if self.state == EntryState.VALUE else 0


UNSET_SCORE = CategoryScore()


class SimpleEntries(BaseModel):
    kind: Literal["simple"] = "simple"
    rounds: list[int] = Field(default_factory=list)


class YahtzeeEntries(BaseModel):
    kind: Literal["yahtzee"] = "yahtzee"
    categories: dict[YahtzeeCategory, CategoryScore] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _no_stored_unset(self) -> Self:
        # cleared boxes are removed from the map, never stored as UNSET
        self.categories = {c: s for c, s in self.categories.items() if s.state != EntryState.UNSET}
        return self


class GolfEntries(BaseModel):
    """Strokes per hole, aligned by index with Game.golf_rounds; None is a hole not yet played."""

    kind: Literal["golf"] = "golf"
    holes: list[int | None] = Field(default_factory=list)


PlayerEntries = Annotated[SimpleEntries | YahtzeeEntries | GolfEntries, Field(discriminator="kind")]

_ENTRY_KIND_BY_VARIANT = {
    GameVariant.SIMPLE: "simple",
    GameVariant.YAHTZEE: "yahtzee",
    GameVariant.GOLF: "golf",
    GameVariant.PUTT_PUTT: "golf",
}


class Phase10Entry(BaseModel):
    score: int = Field(default=0, ge=0)
    phase_completed: bool = False


Phase10Round = dict[str, Phase10Entry]


class GolfHole(BaseModel, frozen=True):
    par: int = Field(ge=1)


def blank_phase10_round(players: list[str]) -> Phase10Round:
    return {player: Phase10Entry() for player in players}


class Game(BaseModel):
    """One play session as stored in the document store.

    `rev` is managed by the store and never written into the document body.
    Phase 10 keeps its raw data in `phase10_rounds`; every other variant
    keeps it per player in `scores`, shaped by the variant.
    """

    id: str
    rev: str | None = None
    name: str
    variant: GameVariant
    status: GameStatus = GameStatus.IN_PROGRESS
    created_date: str
    last_played_at: int = 0  # epoch milliseconds
    players: list[str]
    scores: dict[str, PlayerEntries] = Field(default_factory=dict)
    phase10_rounds: list[Phase10Round] = Field(default_factory=list)
    golf_rounds: list[GolfHole] = Field(default_factory=list)
    course_name: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED

    @model_validator(mode="after")
    def _check_invariants(self) -> Self:
        if not self.players:
            raise ValueError("A game needs at least one player")
        if len(set(self.players)) != len(self.players):
            raise ValueError(f"Player names must be unique: {self.players}")

        unknown = set(self.scores) - set(self.players)
        if unknown:
            raise ValueError(f"Scores recorded for unknown players: {sorted(unknown)}")

        if self.variant == GameVariant.PHASE10:
            self._check_phase10()
        else:
            expected = _ENTRY_KIND_BY_VARIANT[self.variant]
            for player, entries in self.scores.items():
                if entries.kind != expected:
                    raise ValueError(f"{self.variant} game holds {entries.kind} entries for {player!r}")

        if self.variant.is_golf:
            self._check_golf()
        elif self.golf_rounds:
            raise ValueError(f"{self.variant} games have no holes")
        return self

    def _check_phase10(self) -> None:
        if self.scores:
            raise ValueError("Phase 10 games keep their scores in phase10_rounds")
        if not 1 <= len(self.phase10_rounds) <= MAX_PHASE10_ROUNDS:
            raise ValueError(f"Phase 10 games hold between 1 and {MAX_PHASE10_ROUNDS} rounds")
        for index, round_ in enumerate(self.phase10_rounds):
            unknown = set(round_) - set(self.players)
            if unknown:
                raise ValueError(f"Round {index + 1} has entries for unknown players: {sorted(unknown)}")

    def _check_golf(self) -> None:
        if not self.golf_rounds:
            raise ValueError(f"{self.variant} games need at least one hole")
        for player, entries in self.scores.items():
            if len(entries.holes) > len(self.golf_rounds):
                raise ValueError(f"{player!r} has scores for {len(entries.holes)} of {len(self.golf_rounds)} holes")


class CourseTemplate(BaseModel):
    """A named, reusable hole/par layout for Golf and Putt-Putt."""

    id: str | None = None
    rev: str | None = None
    name: str = Field(min_length=1)
    game_type: GameVariant
    hole_count: int = Field(ge=1)
    pars: list[int]

    @model_validator(mode="after")
    def _check_layout(self) -> Self:
        if not self.game_type.is_golf:
            raise ValueError(f"Course templates apply to golf games only, not {self.game_type}")
        if len(self.pars) != self.hole_count:
            raise ValueError(f"Expected {self.hole_count} pars, got {len(self.pars)}")
        if any(par < 1 for par in self.pars):
            raise ValueError("Par values must be positive")
        return self


class GameDraft(BaseModel):
    """What the setup flow supplies to start a game; the repository fills in the rest."""

    variant: GameVariant
    players: list[str]
    name: str | None = None
    course: CourseTemplate | None = None
    pars: list[int] | None = None
    hole_count: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_setup(self) -> Self:
        self.players = [p.strip() for p in self.players]
        if any(not p for p in self.players):
            raise ValueError("Player names must not be blank")
        if not self.variant.is_golf and (self.course or self.pars or self.hole_count):
            raise ValueError(f"{self.variant} games take no course layout")
        if self.course is not None and self.course.game_type != self.variant:
            raise ValueError(f"Course {self.course.name!r} is for {self.course.game_type}, not {self.variant}")
        if self.pars is not None and self.hole_count is not None and len(self.pars) != self.hole_count:
            raise ValueError(f"{len(self.pars)} pars given for a {self.hole_count}-hole course")
        return self


class VersionRecord(BaseModel):
    """Body of the `_local/version` document."""

    version: int = Field(default=0, ge=0)
