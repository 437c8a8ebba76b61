"""Shared stubs for the battle and stage tests."""
from __future__ import annotations
import io
from typing import Iterable, List

from rich.console import Console

from pokeduel.battle.models import Combatant


def make_combatant(name="Testmon", attack=50, defense=30, hp=100, **kw) -> Combatant:
    return Combatant(name=name, types=kw.pop("types", ("normal",)), attack=attack,
                     defense=defense, hp=hp, img=kw.pop("img", f"img/normal-sprite/{name.lower()}.gif"), **kw)


class FixedRng:
    """rng stub: randrange/randint always return the configured pick."""
    def __init__(self, index: int = 0, heal: int | None = None):
        self.index = index
        self.heal = heal
        self.randint_calls: List[tuple] = []

    def randrange(self, n):
        return self.index % n

    def randint(self, a, b):
        self.randint_calls.append((a, b))
        return self.heal if self.heal is not None else a

    def random(self):
        return 0.99


class RecordingAudio:
    def __init__(self):
        self.calls: List[tuple] = []

    def play_music(self, path, loop=False, volume=None):
        self.calls.append(("play_music", str(path), loop, volume))

    def stop_music(self):
        self.calls.append(("stop_music",))

    def play_sfx(self, path, volume=None):
        self.calls.append(("play_sfx", str(path)))


def scripted(answers: Iterable[str]):
    it = iter(answers)
    def reader(prompt: str) -> str:
        return next(it)
    return reader


def quiet_console() -> Console:
    return Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)


def console_text(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]
