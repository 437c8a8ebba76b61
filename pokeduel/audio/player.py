"""Audio engine (looping music + one-shot SFX) on top of pygame.mixer.

Public singleton: ``audio``

  audio.play_music(path, loop=False, volume=None)
  audio.stop_music()
  audio.play_sfx(path, volume=None)

Notes:
  - Lazy initialization: the mixer is only initialized on first use.
  - Missing files or a mixer that fails to initialize (no audio device,
    CI boxes) are logged once and every call becomes a no-op.
"""
from __future__ import annotations
import os
import threading
from dataclasses import dataclass
from pathlib import Path

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from pokeduel.core.logging import logger
from pokeduel.core.paths import ROOT


@dataclass
class _State:
    inited: bool = False
    failed: bool = False
    last_path: str | None = None
    music_playing: bool = False


class AudioEngine:
    def __init__(self):
        self._state = _State()
        self._lock = threading.Lock()

    def _resolve_path(self, path: str | Path) -> Path | None:
        p = Path(path)
        if p.is_file():
            return p
        cand = ROOT / p
        if cand.is_file():
            return cand
        return None

    def _ensure_init(self) -> bool:
        if self._state.inited or self._state.failed:
            return self._state.inited
        with self._lock:
            if self._state.inited or self._state.failed:
                return self._state.inited
            try:
                pygame.mixer.init()
                self._state.inited = True
                logger.debug("AudioInitSuccess")
            except pygame.error as e:  # environment dependent
                self._state.failed = True
                logger.warn("AudioInitFailed", error=str(e))
        return self._state.inited

    def play_music(self, path: str | Path, loop: bool = False, volume: float | None = None):
        rp = self._resolve_path(path)
        if not rp:
            logger.warn("AudioMissingFile", path=str(path))
            return
        if not self._ensure_init():
            return
        try:
            if str(rp) != self._state.last_path:
                pygame.mixer.music.load(str(rp))
                self._state.last_path = str(rp)
            if volume is not None:
                pygame.mixer.music.set_volume(max(0.0, min(1.0, volume)))
            pygame.mixer.music.play(-1 if loop else 0)
            self._state.music_playing = True
            logger.debug("AudioPlayMusic", path=str(rp), loop=loop)
        except pygame.error as e:
            logger.warn("AudioPlayFailed", path=str(rp), error=str(e))

    def stop_music(self):
        if self._state.inited and self._state.music_playing:
            try:
                pygame.mixer.music.stop()
                # rewind so the next play starts at 0
                pygame.mixer.music.rewind()
            except pygame.error as e:
                logger.warn("AudioStopFailed", error=str(e))
        self._state.music_playing = False

    def play_sfx(self, path: str | Path, volume: float | None = None):
        """Play a short sound effect (non-blocking)."""
        rp = self._resolve_path(path)
        if not rp:
            logger.warn("SFXMissingFile", path=str(path))
            return
        if not self._ensure_init():
            return
        try:
            snd = pygame.mixer.Sound(str(rp))
            if volume is not None:
                snd.set_volume(max(0.0, min(1.0, volume)))
            snd.play()
            logger.debug("SFXPlay", path=str(rp))
        except pygame.error as e:
            logger.warn("SFXPlayFailed", path=str(rp), error=str(e))


audio = AudioEngine()
