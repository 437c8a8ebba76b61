"""Combat arithmetic: damage, HP clamping, healing and the win check.

All randomness comes from an injected ``random.Random`` so tests can seed it.
"""
from __future__ import annotations
import random
from typing import Optional

from pokeduel.core.errors import ValidationError
from pokeduel.core.logging import logger
from .models import Combatant, Outcome

SPECIAL_MULTIPLIER = 1.5
DAMAGE_FLOOR = 5
HEAL_RANGE = (10, 29)  # inclusive


def compute_damage(attacker: Combatant, defender: Combatant, is_special: bool) -> float:
    base = attacker.attack * SPECIAL_MULTIPLIER if is_special else attacker.attack
    return max(base - defender.defense, DAMAGE_FLOOR)


def apply_damage(target: Combatant, damage: float):
    if damage < 0:
        raise ValidationError(f"Negative damage {damage} for {target.name}")
    target.hp = max(target.hp - damage, 0)


def heal(target: Combatant, rng: Optional[random.Random] = None) -> float:
    """Heal ``target`` by a random 10..29, never above max_hp.

    Returns the amount actually healed; 0 means the turn was forfeited
    because the target was already at full HP.
    """
    max_hp = target.max_hp if target.max_hp is not None else target.hp
    if target.hp >= max_hp:
        logger.info("HealForfeited", name=target.name, hp=target.hp)
        return 0
    rng = rng or random.Random()
    draw = rng.randint(*HEAL_RANGE)
    actual = min(draw, max_hp - target.hp)
    target.hp += actual
    return actual


def check_outcome(player: Combatant, opponent: Combatant) -> Outcome:
    # Player first: a double knockout counts as a loss.
    if player.hp <= 0:
        return Outcome.PLAYER_DEFEATED
    if opponent.hp <= 0:
        return Outcome.OPPONENT_DEFEATED
    return Outcome.ONGOING


__all__ = ["compute_damage", "apply_damage", "heal", "check_outcome",
           "SPECIAL_MULTIPLIER", "DAMAGE_FLOOR", "HEAL_RANGE"]
