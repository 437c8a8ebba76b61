from __future__ import annotations
import random
import time
from typing import Callable, Optional

from rich.console import Console

from ..audio.player import AudioEngine, audio as default_audio
from ..system.settings import Settings, create_rng
from ..system.store import JsonFileStore, KeyValueStore
from ..ui.input import InputFn
from ..ui.render import console as default_console


class GameContext:
    """Everything the stages share: settings, hand-off store, rng and I/O seams."""

    def __init__(self, settings: Settings, *, rng: Optional[random.Random] = None,
                 store: Optional[KeyValueStore] = None, console: Optional[Console] = None,
                 reader: InputFn = input, sleep: Callable[[float], None] = time.sleep,
                 audio: Optional[AudioEngine] = None):
        self.settings = settings
        self.rng = rng or create_rng()
        self.store = store if store is not None else JsonFileStore(settings.store_path())
        self.console = console or default_console
        self.reader = reader
        self._sleep = sleep
        self.audio = audio or default_audio

    @property
    def ttl(self) -> int:
        return self.settings.data.handoff_ttl

    @property
    def shiny_rate(self) -> float:
        return self.settings.data.shiny_rate

    def wait(self, seconds: float):
        scaled = self.settings.delay(seconds)
        if scaled > 0:
            self._sleep(scaled)
