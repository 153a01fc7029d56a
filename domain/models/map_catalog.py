"""
Static map catalog used by map votes.

The catalog is a JSON array of objects keyed by ``Map Name``, ``Game Mode``,
``Game Type`` and ``Lobby Size``. The last three are free-text tags; filters
match them by case-insensitive substring.
"""

import json
import logging
from dataclasses import dataclass

logger = logging.getLogger("lobby_bot.domain.map_catalog")

# (value, label) pairs offered to the host when setting up a vote.
LOBBY_SIZE_OPTIONS: tuple[tuple[str, str], ...] = (
    ("small", "Small 2-8"),
    ("medium", "Medium 9-16"),
    ("large", "Large 17-24"),
    ("any", "Any 2-24"),
)

GAMEMODE_OPTIONS: tuple[tuple[str, str], ...] = (
    ("minigame", "Minigame"),
    ("standard", "Standard"),
    ("infection", "Infection"),
    ("vehicle", "Vehicle"),
    ("other", "Other"),
)

LOBBY_SIZE_TAGS = frozenset(value for value, _ in LOBBY_SIZE_OPTIONS)
GAMEMODE_TAGS = frozenset(value for value, _ in GAMEMODE_OPTIONS)


@dataclass(frozen=True)
class MapEntry:
    """One row of the map catalog."""

    name: str
    game_mode: str | None = None
    game_type: str | None = None
    lobby_size: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MapEntry":
        return cls(
            name=str(data.get("Map Name", "")).strip(),
            game_mode=data.get("Game Mode"),
            game_type=data.get("Game Type"),
            lobby_size=data.get("Lobby Size"),
        )


class MapCatalog:
    """Immutable collection of map entries, loaded once at startup."""

    def __init__(self, entries: list[MapEntry] | tuple[MapEntry, ...] = ()):
        self._entries: tuple[MapEntry, ...] = tuple(entries)

    @classmethod
    def from_records(cls, records: list[dict]) -> "MapCatalog":
        return cls([MapEntry.from_dict(r) for r in records if isinstance(r, dict)])

    @classmethod
    def load(cls, path: str) -> "MapCatalog":
        """
        Load the catalog from a JSON file.

        A missing or malformed file yields an empty catalog; every vote then
        reports that no maps matched.
        """
        try:
            with open(path, encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Error reading map catalog {path}: {exc}")
            return cls()

        if not isinstance(records, list):
            logger.error(f"Map catalog {path} is not a JSON array")
            return cls()

        catalog = cls.from_records(records)
        logger.info(f"Loaded {len(catalog)} maps from {path}")
        return catalog

    @property
    def entries(self) -> tuple[MapEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
