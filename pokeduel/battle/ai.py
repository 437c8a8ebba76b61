from __future__ import annotations
import random
from .models import Action

ACTIONS = (Action.ATTACK, Action.SPECIAL, Action.HEAL)

def choose_action(rng: random.Random) -> Action:
    return ACTIONS[rng.randrange(len(ACTIONS))]
