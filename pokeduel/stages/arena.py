"""Stage 3: the battle itself.

Drives a :class:`BattleSession` and plays back the presentation events each
turn returns: log lines, HP refreshes, the opponent's thinking pause, music
stop, defeat animation and the delayed outcome popup.
"""
from __future__ import annotations
from typing import Callable, Iterable, Optional

from pokeduel.battle.events import EventKind, PresentationEvent
from pokeduel.battle.models import Action, Outcome, TurnState
from pokeduel.battle.session import BattleSession
from pokeduel.core.paths import BATTLE_MUSIC
from pokeduel.game.context import GameContext
from pokeduel.system.store import load_matchup
from pokeduel.ui.input import get_choice
from pokeduel.ui.render import battle_view, log_panel, popup

ActionChooser = Callable[[BattleSession], Action]

_MENU = {"Attack": Action.ATTACK, "Special": Action.SPECIAL, "Heal": Action.HEAL}


def prompt_action(ctx: GameContext) -> ActionChooser:
    def choose(session: BattleSession) -> Action:
        label = get_choice(f"What will {session.player.name} do?", list(_MENU),
                           console=ctx.console, reader=ctx.reader)
        return _MENU[label]
    return choose


def _render(ctx: GameContext, session: BattleSession, fainted_role: Optional[str] = None):
    ctx.console.print(battle_view(session.player, session.opponent, fainted_role=fainted_role))


def play_events(ctx: GameContext, session: BattleSession, events: Iterable[PresentationEvent]):
    for ev in events:
        if ev.kind is EventKind.LOG:
            ctx.console.print(f"[bold]›[/bold] {ev.message}")
        elif ev.kind is EventKind.HP_CHANGED:
            _render(ctx, session)
        elif ev.kind is EventKind.TURN_CHANGED:
            if ev.role == "player":
                ctx.console.print(log_panel(session.log))
        elif ev.kind is EventKind.OPPONENT_THINKING:
            ctx.console.print(f"[dim]{session.opponent.name} is thinking...[/dim]")
            ctx.wait(ev.delay)
        elif ev.kind is EventKind.STOP_MUSIC:
            ctx.audio.stop_music()
        elif ev.kind is EventKind.DEFEAT_ANIMATION:
            _render(ctx, session, fainted_role=ev.role)
        elif ev.kind is EventKind.SHOW_POPUP:
            ctx.wait(ev.delay)
            ctx.console.print(popup(ev.message or ""))


def run_arena(ctx: GameContext, choose: Optional[ActionChooser] = None) -> Outcome:
    player, opponent = load_matchup(ctx.store)
    data = ctx.settings.data
    session = BattleSession(player, opponent, ctx.rng,
                            opponent_delay=data.opponent_delay, popup_delay=data.popup_delay)
    choose = choose or prompt_action(ctx)

    ctx.audio.play_music(BATTLE_MUSIC, loop=True, volume=data.music_volume)
    _render(ctx, session)
    while not session.is_over():
        if session.state is TurnState.PLAYER_TURN:
            result = session.submit(choose(session))
        else:
            result = session.opponent_turn()
        play_events(ctx, session, result.events)
    return session.outcome


__all__ = ["run_arena", "play_events", "prompt_action"]
