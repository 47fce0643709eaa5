"\"\"\"Collaborator contracts and in-process store implementations.\"\"\""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Iterable, Literal, Protocol, runtime_checkable

import pendulum

from .config import ConfigManager
from .errors import DatastoreUnavailable
from .schemas import AttemptRecord, GameDefinition, ReferenceAnswer, ReviewQueueItem

InsertOutcome = Literal["inserted", "conflict"]


@runtime_checkable
class GameRegistry(Protocol):
    def lookup(self, game_id: str) -> GameDefinition | None:
        """Return the game definition or ``None`` when unknown."""


@runtime_checkable
class AttemptStore(Protocol):
    """Attempt persistence; uniqueness is enforced on (player_id, game_id)."""

    def exists(self, player_id: str, game_id: str) -> bool:
        """Return True when an attempt is already recorded."""

    def insert_if_absent(self, record: AttemptRecord) -> InsertOutcome:
        """Insert atomically, reporting ``conflict`` when a row already exists."""


@runtime_checkable
class ReferenceCorpusStore(Protocol):
    def query_by_game(self, game_id: str) -> list[ReferenceAnswer]:
        """Return every reference entry for the game."""

    def append(self, entry: ReferenceAnswer) -> None:
        """Append a new reference entry."""


@runtime_checkable
class ReviewQueueStore(Protocol):
    def enqueue(self, item: ReviewQueueItem) -> None:
        """Add an item to the human review queue."""


@runtime_checkable
class AnalyticsSink(Protocol):
    def log(self, event: str, payload: dict[str, Any]) -> None:
        """Record an analytics event."""


class InMemoryGameRegistry:
    def __init__(self, games: Iterable[GameDefinition] = ()):
        self._games = {game.game_id: game for game in games}

    def lookup(self, game_id: str) -> GameDefinition | None:
        return self._games.get(game_id)

    def games(self) -> list[GameDefinition]:
        return list(self._games.values())


class YamlGameRegistry(InMemoryGameRegistry):
    """Game registry backed by a ``games`` YAML document."""

    def __init__(self, manager: ConfigManager, name: str = "games"):
        document = manager.load(name)
        raw_games = document.get("games", [])
        if not isinstance(raw_games, list):
            raise ValueError("'games' must be a list of game definitions")
        super().__init__(GameDefinition.model_validate(item) for item in raw_games)

    @classmethod
    def from_path(cls, path: str | Path) -> "YamlGameRegistry":
        manager, name = ConfigManager.for_file(path)
        return cls(manager, name)


class InMemoryAttemptStore:
    def __init__(self) -> None:
        self._records: dict[tuple[str, str], AttemptRecord] = {}
        self._lock = threading.Lock()
        self.available = True

    def exists(self, player_id: str, game_id: str) -> bool:
        self._check()
        with self._lock:
            return (player_id, game_id) in self._records

    def insert_if_absent(self, record: AttemptRecord) -> InsertOutcome:
        self._check()
        key = (record.player_id, record.game_id)
        with self._lock:
            if key in self._records:
                return "conflict"
            self._records[key] = record
            return "inserted"

    def get(self, player_id: str, game_id: str) -> AttemptRecord | None:
        with self._lock:
            return self._records.get((player_id, game_id))

    def __len__(self) -> int:
        return len(self._records)

    def _check(self) -> None:
        if not self.available:
            raise DatastoreUnavailable("attempt store is unavailable")


class InMemoryReferenceCorpus:
    def __init__(self, entries: Iterable[ReferenceAnswer] = ()):
        self._entries: list[ReferenceAnswer] = list(entries)
        self._lock = threading.Lock()
        self.available = True

    def query_by_game(self, game_id: str) -> list[ReferenceAnswer]:
        if not self.available:
            raise DatastoreUnavailable("reference corpus is unavailable")
        with self._lock:
            return [entry for entry in self._entries if entry.game_id == game_id]

    def append(self, entry: ReferenceAnswer) -> None:
        if not self.available:
            raise DatastoreUnavailable("reference corpus is unavailable")
        with self._lock:
            self._entries.append(entry)

    def __len__(self) -> int:
        return len(self._entries)


class InMemoryReviewQueue:
    def __init__(self) -> None:
        self.items: list[ReviewQueueItem] = []
        self._lock = threading.Lock()

    def enqueue(self, item: ReviewQueueItem) -> None:
        with self._lock:
            self.items.append(item)


class InMemoryAnalyticsSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def log(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))


class JsonlAnalyticsSink:
    """Append-only analytics sink writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def log(self, event: str, payload: dict[str, Any]) -> None:
        record = {"event": event, "timestamp": pendulum.now("UTC").to_iso8601_string(), **payload}
        with self._lock, self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=str))
            handle.write("\n")


class NullAnalyticsSink:
    def log(self, event: str, payload: dict[str, Any]) -> None:
        return None
