from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pokeduel.core.errors import ValidationError

NORMAL_SPRITE = "normal-sprite"
SHINY_SPRITE = "shiny-sprite"


class Action(str, Enum):
    ATTACK = "attack"
    SPECIAL = "special"
    HEAL = "heal"


class Outcome(str, Enum):
    ONGOING = "ONGOING"
    PLAYER_DEFEATED = "PLAYER_DEFEATED"
    OPPONENT_DEFEATED = "OPPONENT_DEFEATED"


class TurnState(str, Enum):
    PLAYER_TURN = "PLAYER_TURN"
    OPPONENT_TURN = "OPPONENT_TURN"
    TERMINAL = "TERMINAL"


class Side(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"


@dataclass
class Combatant:
    name: str
    types: Tuple[str, ...]
    attack: float
    defense: float
    hp: float
    img: str = ""
    shiny: bool = False
    max_hp: Optional[float] = None  # captured when combat begins

    def __post_init__(self):
        self.types = tuple(self.types)
        if self.attack < 0 or self.defense < 0:
            raise ValidationError(f"{self.name}: attack/defense must be non-negative")
        if self.hp < 0:
            raise ValidationError(f"{self.name}: hp must be non-negative")
        if self.max_hp is not None and self.hp > self.max_hp:
            raise ValidationError(f"{self.name}: hp {self.hp} exceeds max_hp {self.max_hp}")

    def begin_battle(self):
        """Record the pre-battle hp as max_hp.

        A record takes part in one battle only; a rematch needs fresh records.
        """
        if self.max_hp is not None:
            raise ValidationError(f"{self.name}: already in a battle (max_hp {self.max_hp})")
        self.max_hp = self.hp

    def is_fainted(self) -> bool:
        return self.hp <= 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["types"] = list(self.types)
        if self.max_hp is None:
            data.pop("max_hp")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Combatant":
        try:
            return cls(
                name=str(data["name"]),
                types=tuple(data.get("types", ())),
                attack=data["attack"],
                defense=data["defense"],
                hp=data["hp"],
                img=data.get("img", ""),
                shiny=bool(data.get("shiny", False)),
                max_hp=data.get("max_hp"),
            )
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Malformed combatant record: {e}") from e


__all__ = ["Action", "Outcome", "TurnState", "Side", "Combatant", "NORMAL_SPRITE", "SHINY_SPRITE"]
