"""Battle session: the alternating player/opponent turn state machine.

A session owns both combatants from the moment it is created until a win
check reports a terminal outcome. Each resolved turn yields a
:class:`TurnResult` carrying the log line and the presentation events the
front-end should play.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union
import random

from pokeduel.core.errors import InvalidStateError, ValidationError
from pokeduel.core.logging import logger
from .ai import choose_action
from .events import EventKind, PresentationEvent
from .mechanics import apply_damage, check_outcome, compute_damage, heal
from .models import Action, Combatant, Outcome, Side, TurnState

WIN_MESSAGE = "You won! You defeated the opposing Pokémon."
LOSS_MESSAGE = "You lost! Your Pokémon was defeated."


def _fmt(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else f"{amount:g}"


@dataclass(frozen=True)
class TurnResult:
    side: Side
    action: Action
    amount: float
    message: str
    outcome: Outcome
    state: TurnState
    events: Tuple[PresentationEvent, ...]


class BattleSession:
    def __init__(self, player: Combatant, opponent: Combatant, rng: Optional[random.Random] = None, *,
                 opponent_delay: float = 2.0, popup_delay: float = 4.0,
                 message_cb: Optional[Callable[[str], None]] = None):
        self.player = player
        self.opponent = opponent
        self.rng = rng or random.Random()
        self.opponent_delay = opponent_delay
        self.popup_delay = popup_delay
        self.message_cb = message_cb
        self.state = TurnState.PLAYER_TURN
        self.outcome = Outcome.ONGOING
        self.turn_counter = 0
        self.log: List[str] = []
        self.history: List[TurnResult] = []
        player.begin_battle()
        opponent.begin_battle()
        logger.info("BattleStart", player=player.name, opponent=opponent.name)

    def is_over(self) -> bool:
        return self.state is TurnState.TERMINAL

    def combatant(self, side: Side) -> Combatant:
        return self.player if side is Side.PLAYER else self.opponent

    # ------------------------------------------------------------------
    # Turn entry points
    # ------------------------------------------------------------------
    def submit(self, action: Union[Action, str]) -> TurnResult:
        """Resolve the player's action. Only valid during PLAYER_TURN."""
        if self.state is not TurnState.PLAYER_TURN:
            name = getattr(action, "value", action)
            logger.warn("ActionRejected", state=self.state.value, action=name)
            raise InvalidStateError(self.state.value, str(name))
        try:
            act = Action(action)
        except ValueError:
            raise ValidationError(f"Unknown action '{action}'") from None
        return self._play(Side.PLAYER, act)

    def opponent_turn(self) -> TurnResult:
        """Let the opponent pick uniformly among the three actions and resolve it."""
        if self.state is not TurnState.OPPONENT_TURN:
            raise InvalidStateError(self.state.value, "opponent_turn")
        return self._play(Side.OPPONENT, choose_action(self.rng))

    def run_auto(self, player_policy: Optional[Callable[["BattleSession"], Action]] = None,
                 max_turns: int = 1000) -> Outcome:
        """Play both sides without a front-end until the battle ends."""
        policy = player_policy or (lambda s: choose_action(s.rng))
        while not self.is_over() and self.turn_counter < max_turns:
            if self.state is TurnState.PLAYER_TURN:
                self.submit(policy(self))
            else:
                self.opponent_turn()
        return self.outcome

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def _resolve(self, side: Side, action: Action) -> Tuple[float, str]:
        user = self.combatant(side)
        foe = self.opponent if side is Side.PLAYER else self.player
        if action is Action.HEAL:
            amount = heal(user, self.rng)
            if amount > 0:
                return amount, f"{user.name} healed and recovered {_fmt(amount)} HP!"
            return 0, f"{user.name} can't heal because its HP is already full! It loses the turn."
        damage = compute_damage(user, foe, action is Action.SPECIAL)
        apply_damage(foe, damage)
        if action is Action.SPECIAL:
            return damage, f"{user.name} used a special attack dealing {_fmt(damage)} damage!"
        return damage, f"{user.name} attacked {foe.name} dealing {_fmt(damage)} damage!"

    def _play(self, side: Side, action: Action) -> TurnResult:
        amount, message = self._resolve(side, action)
        self.turn_counter += 1
        self.log.append(message)
        if self.message_cb:
            self.message_cb(message)
        logger.debug("TurnResolved", turn=self.turn_counter, side=side.value, action=action.value,
                     amount=amount, player_hp=self.player.hp, opponent_hp=self.opponent.hp)

        events: List[PresentationEvent] = [PresentationEvent(EventKind.LOG, role=side.value, message=message)]
        self.outcome = check_outcome(self.player, self.opponent)
        if self.outcome is not Outcome.ONGOING:
            self.state = TurnState.TERMINAL
            events.extend(self._terminal_events())
            logger.info("BattleEnd", outcome=self.outcome.value, turns=self.turn_counter)
        elif side is Side.PLAYER:
            self.state = TurnState.OPPONENT_TURN
            events.append(PresentationEvent(EventKind.HP_CHANGED))
            events.append(PresentationEvent(EventKind.TURN_CHANGED, role=Side.OPPONENT.value))
            events.append(PresentationEvent(EventKind.OPPONENT_THINKING, role=Side.OPPONENT.value,
                                            delay=self.opponent_delay))
        else:
            self.state = TurnState.PLAYER_TURN
            events.append(PresentationEvent(EventKind.HP_CHANGED))
            events.append(PresentationEvent(EventKind.TURN_CHANGED, role=Side.PLAYER.value))

        result = TurnResult(side=side, action=action, amount=amount, message=message,
                            outcome=self.outcome, state=self.state, events=tuple(events))
        self.history.append(result)
        return result

    def _terminal_events(self) -> List[PresentationEvent]:
        if self.outcome is Outcome.PLAYER_DEFEATED:
            loser, popup = Side.PLAYER, LOSS_MESSAGE
        else:
            loser, popup = Side.OPPONENT, WIN_MESSAGE
        return [
            PresentationEvent(EventKind.STOP_MUSIC),
            PresentationEvent(EventKind.HP_CHANGED),
            PresentationEvent(EventKind.DEFEAT_ANIMATION, role=loser.value),
            PresentationEvent(EventKind.SHOW_POPUP, message=popup, delay=self.popup_delay),
        ]


__all__ = ["BattleSession", "TurnResult", "WIN_MESSAGE", "LOSS_MESSAGE"]
