from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
import random
from pokeduel.core.logging import logger

SETTINGS_FILENAME = ".pokeduel_settings.json"
STORE_FILENAME = ".pokeduel_store.json"
SEED_ENV = "PKD_RNG_SEED"

@dataclass
class SettingsData:
    log_level: str = "WARN"        # DEBUG / INFO / WARN / ERROR
    pacing: float = 1.0            # multiplier on every presentation delay; 0 = no waiting
    opponent_delay: float = 2.0    # seconds before the opponent moves
    popup_delay: float = 4.0       # seconds before the end-of-battle popup
    shiny_rate: float = 0.1
    music_volume: float = 0.4
    handoff_ttl: int = 86400       # seconds a stage hand-off stays valid
    store_path: str = ""           # empty -> next to the settings file

    def normalize(self):
        if self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "WARN"
        self.pacing = max(0.0, float(self.pacing))
        self.opponent_delay = max(0.0, float(self.opponent_delay))
        self.popup_delay = max(0.0, float(self.popup_delay))
        self.shiny_rate = max(0.0, min(1.0, float(self.shiny_rate)))
        self.music_volume = max(0.0, min(1.0, float(self.music_volume)))
        if int(self.handoff_ttl) <= 0:
            self.handoff_ttl = 86400
        self.handoff_ttl = int(self.handoff_ttl)

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except Exception as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def store_path(self) -> Path:
        if self.data.store_path:
            return Path(self.data.store_path).expanduser()
        return self.path.parent / STORE_FILENAME

    def delay(self, seconds: float) -> float:
        """Scale a presentation delay by the pacing multiplier."""
        return seconds * self.data.pacing

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def update(self, **changes):
        for k, v in changes.items():
            if not hasattr(self.data, k):
                raise AttributeError(f"Unknown setting '{k}'")
            setattr(self.data, k, v)
        self.data.normalize()
        logger.set_level(self.data.log_level)  # type: ignore[arg-type]
        self._notify()

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)


def create_rng(seed: Optional[int] = None) -> random.Random:
    """Create the session RNG, optionally seeded from the environment."""
    if seed is None:
        env = os.environ.get(SEED_ENV)
        if env:
            try:
                seed = int(env)
            except ValueError:
                logger.warn("InvalidSeedIgnored", value=env)
    return random.Random(seed)
