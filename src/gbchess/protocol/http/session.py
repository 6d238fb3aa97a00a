from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from ...engine.game import GameState


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Serialize mutation of a session through `locked`
    - Delete sessions
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, GameState] = {}

    def create(self, game: Optional[GameState] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if game is None:
            game = GameState.new()
        with self._lock:
            self._games[gid] = game
        return gid

    def get(self, game_id: str) -> Optional[GameState]:
        with self._lock:
            return self._games.get(game_id)

    @contextmanager
    def locked(self, game_id: str) -> Iterator[Optional[GameState]]:
        """Yield the session's game while holding the store lock.

        Moves and clones go through here so a clone never observes a half
        applied move.
        """
        with self._lock:
            yield self._games.get(game_id)

    def delete(self, game_id: str) -> None:
        with self._lock:
            if game_id in self._games:
                del self._games[game_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
