"""
Map selection domain service.

Pure logic for the map vote: catalog filtering, candidate sampling and winner
resolution. Randomness comes from an injected ``random.Random`` so tests can
seed it.
"""

import random

from domain.models.map_catalog import MapCatalog, MapEntry
from domain.models.map_vote import VoteOutcome


class MapSelectionService:
    """
    Pure domain service for picking maps.

    Responsibilities:
    - Filter the catalog by size and gamemode tags
    - Draw a uniform random sample of candidates
    - Resolve a tally into a winner, breaking ties at random
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def filter_maps(
        self, catalog: MapCatalog, sizes: list[str], gamemodes: list[str]
    ) -> list[MapEntry]:
        """
        Return catalog entries matching at least one size AND one gamemode tag.

        Tags match by case-insensitive substring of the entry's free-text
        ``Lobby Size`` / ``Game Type``. Entries missing either field never match.

        Args:
            catalog: Map catalog to search
            sizes: Selected lobby size tags (e.g. ["small", "any"])
            gamemodes: Selected gamemode tags (e.g. ["standard"])

        Returns:
            Matching entries in catalog order
        """
        size_tags = [s.lower().strip() for s in sizes if s and s.strip()]
        mode_tags = [g.lower().strip() for g in gamemodes if g and g.strip()]

        matches = []
        for entry in catalog:
            game_type = (entry.game_type or "").lower().strip()
            lobby_size = (entry.lobby_size or "").lower().strip()
            if not game_type or not lobby_size:
                continue
            if not any(tag in game_type for tag in mode_tags):
                continue
            if not any(tag in lobby_size for tag in size_tags):
                continue
            matches.append(entry)
        return matches

    def shuffle(self, items: list) -> list:
        """Fisher-Yates shuffle of a copy of ``items``."""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.rng.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def sample_candidates(self, maps: list[MapEntry], count: int = 3) -> list[MapEntry]:
        """Draw ``min(count, len(maps))`` distinct maps without replacement."""
        return self.shuffle(maps)[:count]

    def pick_winner(self, candidates: list[MapEntry], tallies: dict[int, int]) -> VoteOutcome:
        """
        Resolve a vote.

        With no positive votes the winner is drawn uniformly from all
        candidates. Otherwise it is drawn uniformly from the candidates that
        share the highest count.

        Raises:
            ValueError: If there are no candidates
        """
        if not candidates:
            raise ValueError("Cannot pick a winner without candidates.")

        counts = {i: tallies.get(i, 0) for i in range(len(candidates))}
        top = max(counts.values())
        if top <= 0:
            winner = self.rng.choice(candidates)
            return VoteOutcome(map=winner, votes=0, randomly_chosen=True)

        tied = [i for i, votes in counts.items() if votes == top]
        index = tied[0] if len(tied) == 1 else self.rng.choice(tied)
        return VoteOutcome(map=candidates[index], votes=top, randomly_chosen=False)
