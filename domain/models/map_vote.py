"""
Map vote session state.

A session lives for exactly one /mapvote invocation and moves forward only:
selecting_lobby -> selecting_filters -> voting -> resolved, with aborted
reachable from any non-terminal step.
"""

from dataclasses import dataclass, field
from enum import Enum

from domain.models.map_catalog import MapEntry

NUMBER_MARKERS = ("1️⃣", "2️⃣", "3️⃣")


class VoteStep(Enum):
    SELECTING_LOBBY = "selecting_lobby"
    SELECTING_FILTERS = "selecting_filters"
    VOTING = "voting"
    RESOLVED = "resolved"
    ABORTED = "aborted"


TERMINAL_STEPS = frozenset({VoteStep.RESOLVED, VoteStep.ABORTED})


@dataclass(frozen=True)
class VoteOutcome:
    """The winning map and how it was chosen."""

    map: MapEntry
    votes: int
    randomly_chosen: bool


@dataclass
class VoteSession:
    """State for one map vote."""

    guild_id: int
    host_id: int
    lobby_id: str | None = None
    channel_id: int | None = None
    sizes: list[str] = field(default_factory=list)
    gamemodes: list[str] = field(default_factory=list)
    candidates: list[MapEntry] = field(default_factory=list)
    tallies: dict[int, int] = field(default_factory=dict)  # candidate index -> votes
    deadline: float | None = None
    step: VoteStep = VoteStep.SELECTING_LOBBY
    abort_reason: str | None = None
    outcome: VoteOutcome | None = None

    @property
    def is_finished(self) -> bool:
        return self.step in TERMINAL_STEPS

    def abort(self, reason: str) -> None:
        if self.is_finished:
            return
        self.step = VoteStep.ABORTED
        self.abort_reason = reason

    def open_voting(self, candidates: list[MapEntry], deadline: float) -> None:
        self.candidates = list(candidates)
        self.tallies = {i: 0 for i in range(len(self.candidates))}
        self.deadline = deadline
        self.step = VoteStep.VOTING

    def record_counts(self, raw_counts: dict[int, int], seeded: bool) -> None:
        """
        Store per-candidate vote counts collected at window close.

        When the announcer seeded its own marker on each candidate, one vote
        per candidate is discounted. Indices outside the candidate range are
        ignored.
        """
        if self.step is not VoteStep.VOTING:
            return
        offset = 1 if seeded else 0
        for index, count in raw_counts.items():
            if 0 <= index < len(self.candidates):
                self.tallies[index] = max(0, count - offset)

    def resolve(self, outcome: VoteOutcome) -> None:
        self.outcome = outcome
        self.step = VoteStep.RESOLVED

    def marker(self, index: int) -> str:
        return NUMBER_MARKERS[index]
