"""Short-lived key-value storage used to hand combatants between stages.

Every entry carries an expiry timestamp; expired entries read as missing
and are dropped on access. Two backends share the same surface:
:class:`MemoryStore` for tests and single-process runs, and
:class:`JsonFileStore` which keeps one JSON document on disk so separate
runs of the CLI can pick up where the last stage left off.
"""
from __future__ import annotations
import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from pokeduel.battle.models import Combatant
from pokeduel.core.errors import MissingCombatantError, ValidationError
from pokeduel.core.logging import logger

DEFAULT_TTL = 86400  # 24h
SELECTED_KEY = "selectedPokemon"
PLAYER_KEY = "playerPokemon"
OPPONENT_KEY = "opponentPokemon"

Clock = Callable[[], float]


class KeyValueStore(Protocol):
    def put(self, key: str, value: Any, ttl: float = DEFAULT_TTL) -> None: ...
    def get(self, key: str) -> Optional[Any]: ...
    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def put(self, key: str, value: Any, ttl: float = DEFAULT_TTL):
        if ttl <= 0:
            raise ValidationError(f"TTL must be positive, got {ttl}")
        self._entries[key] = (value, self._clock() + ttl)

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            logger.debug("StoreExpired", key=key)
            del self._entries[key]
            return None
        return value

    def delete(self, key: str):
        self._entries.pop(key, None)


class JsonFileStore:
    def __init__(self, path: Path, clock: Clock = time.time):
        self.path = Path(path)
        self._clock = clock

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.is_file():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warn("StoreReadFailed", path=str(self.path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            logger.warn("StoreReadFailed", path=str(self.path), error="not an object")
            return {}
        return raw

    def _write(self, data: Dict[str, Dict[str, Any]]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def put(self, key: str, value: Any, ttl: float = DEFAULT_TTL):
        if ttl <= 0:
            raise ValidationError(f"TTL must be positive, got {ttl}")
        data = self._read()
        data[key] = {"value": value, "expires_at": self._clock() + ttl}
        self._write(data)
        logger.debug("StorePut", key=key, ttl=ttl)

    def get(self, key: str) -> Optional[Any]:
        data = self._read()
        entry = data.get(key)
        if not isinstance(entry, dict) or not isinstance(entry.get("expires_at"), (int, float)):
            return None
        if self._clock() >= float(entry["expires_at"]):
            logger.debug("StoreExpired", key=key)
            del data[key]
            self._write(data)
            return None
        return entry.get("value")

    def delete(self, key: str):
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


# ---------------------------------------------------------------------------
# Stage hand-off helpers
# ---------------------------------------------------------------------------

def _load_combatant(store: KeyValueStore, key: str) -> Optional[Combatant]:
    raw = store.get(key)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        logger.warn("StoredCombatantMalformed", key=key)
        return None
    try:
        return Combatant.from_dict(raw)
    except ValidationError as e:
        logger.warn("StoredCombatantMalformed", key=key, error=str(e))
        return None


def save_selection(store: KeyValueStore, combatant: Combatant, ttl: float = DEFAULT_TTL):
    store.put(SELECTED_KEY, combatant.to_dict(), ttl)


def load_selection(store: KeyValueStore) -> Optional[Combatant]:
    return _load_combatant(store, SELECTED_KEY)


def save_matchup(store: KeyValueStore, player: Combatant, opponent: Combatant, ttl: float = DEFAULT_TTL):
    store.put(PLAYER_KEY, player.to_dict(), ttl)
    store.put(OPPONENT_KEY, opponent.to_dict(), ttl)


def load_matchup(store: KeyValueStore) -> Tuple[Combatant, Combatant]:
    """Return (player, opponent) or raise MissingCombatantError naming what is absent."""
    player = _load_combatant(store, PLAYER_KEY)
    opponent = _load_combatant(store, OPPONENT_KEY)
    missing = [k for k, v in ((PLAYER_KEY, player), (OPPONENT_KEY, opponent)) if v is None]
    if missing:
        raise MissingCombatantError(missing)
    return player, opponent  # type: ignore[return-value]


__all__ = ["KeyValueStore", "MemoryStore", "JsonFileStore", "DEFAULT_TTL",
           "SELECTED_KEY", "PLAYER_KEY", "OPPONENT_KEY",
           "save_selection", "load_selection", "save_matchup", "load_matchup"]
