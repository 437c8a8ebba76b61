"""Roster loading and the random draws made before a battle.

The roster is a JSON list of species records validated against
``schema/combatant.schema.json``. Loaded records are kept as templates;
every selection gets its own copy so a battle never mutates the roster.
"""
from __future__ import annotations
import json
import random
from dataclasses import replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence, Tuple

import jsonschema

from pokeduel.battle.models import Combatant, NORMAL_SPRITE, SHINY_SPRITE
from pokeduel.core.errors import DataLoadError, ValidationError
from pokeduel.core.logging import logger
from pokeduel.core.paths import COMBATANT_SCHEMA, ROSTER_FILE

DEFAULT_SHINY_RATE = 0.1


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DataLoadError(str(path), str(e)) from e
    except ValueError as e:
        raise DataLoadError(str(path), f"invalid JSON: {e}") from e


def _validate(data: Any, path: Path, schema_path: Path):
    schema = _read_json(schema_path)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(str(path), f"schema: {e.message}") from e


def load_roster_file(path: Path, schema_path: Path = COMBATANT_SCHEMA) -> Tuple[Combatant, ...]:
    raw = _read_json(path)
    _validate(raw, path, schema_path)
    roster = tuple(Combatant.from_dict(entry) for entry in raw)
    names = [c.name for c in roster]
    if len(set(names)) != len(names):
        raise DataLoadError(str(path), "duplicate species names")
    logger.debug("RosterLoaded", path=str(path), count=len(roster))
    return roster


@lru_cache(maxsize=None)
def load_roster() -> Tuple[Combatant, ...]:
    return load_roster_file(ROSTER_FILE)


def roll_shiny(rng: random.Random, rate: float = DEFAULT_SHINY_RATE) -> bool:
    return rng.random() < rate


def shiny_image(img: str) -> str:
    return img.replace(NORMAL_SPRITE, SHINY_SPRITE)


def make_variant(template: Combatant, shiny: bool) -> Combatant:
    """Fresh copy of a roster entry, with the shiny sprite when rolled."""
    img = shiny_image(template.img) if shiny else template.img
    return replace(template, img=img, shiny=shiny, max_hp=None)


def roll_roster(roster: Sequence[Combatant], rng: random.Random,
                rate: float = DEFAULT_SHINY_RATE) -> Tuple[Combatant, ...]:
    """The selection screen's cards: each entry independently rolled shiny."""
    return tuple(make_variant(t, roll_shiny(rng, rate)) for t in roster)


def pick_opponent(roster: Sequence[Combatant], player: Combatant, rng: random.Random,
                  shiny_rate: float = DEFAULT_SHINY_RATE) -> Combatant:
    candidates = [c for c in roster if c.name != player.name]
    if not candidates:
        raise ValidationError(f"No opponent available for {player.name}")
    template = candidates[rng.randrange(len(candidates))]
    return make_variant(template, roll_shiny(rng, shiny_rate))


__all__ = ["load_roster", "load_roster_file", "roll_shiny", "shiny_image", "make_variant",
           "roll_roster", "pick_opponent", "DEFAULT_SHINY_RATE"]
