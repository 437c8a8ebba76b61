"""
Battle package.
- models.py (Combatant, Action, Outcome, TurnState)
- mechanics.py (damage, HP clamping, healing, win check)
- ai.py (opponent decision)
- events.py (presentation events handed to the front-end)
- session.py (turn state machine)
"""
from .models import Action, Combatant, Outcome, Side, TurnState
from .mechanics import apply_damage, check_outcome, compute_damage, heal
from .session import BattleSession, TurnResult
__all__ = ["Action", "Combatant", "Outcome", "Side", "TurnState",
           "apply_damage", "check_outcome", "compute_damage", "heal",
           "BattleSession", "TurnResult"]
