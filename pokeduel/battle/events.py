"""Presentation events emitted by a resolved turn.

The battle core never sleeps or touches the screen; it describes what the
front-end should do and the front-end owns the timing.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EventKind(str, Enum):
    LOG = "log"
    HP_CHANGED = "hp_changed"
    OPPONENT_THINKING = "opponent_thinking"
    TURN_CHANGED = "turn_changed"
    STOP_MUSIC = "stop_music"
    DEFEAT_ANIMATION = "defeat_animation"
    SHOW_POPUP = "show_popup"


@dataclass(frozen=True)
class PresentationEvent:
    kind: EventKind
    role: Optional[str] = None     # "player" | "opponent"
    message: Optional[str] = None
    delay: float = 0.0             # seconds to wait before acting on it


__all__ = ["EventKind", "PresentationEvent"]
