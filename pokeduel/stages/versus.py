"""Stage 2: draw the opponent and play the versus presentation."""
from __future__ import annotations
from typing import Callable, List, Tuple

from rich.align import Align
from rich.text import Text

from pokeduel.battle.models import Combatant
from pokeduel.core.errors import MissingCombatantError
from pokeduel.core.logging import logger
from pokeduel.core.paths import VS_SOUND
from pokeduel.data.roster import load_roster, pick_opponent
from pokeduel.game.context import GameContext
from pokeduel.system.store import SELECTED_KEY, load_selection, save_matchup
from pokeduel.ui.render import versus_card

# (seconds from stage start, step)
Timeline = List[Tuple[float, Callable[[], None]]]


def _timeline(ctx: GameContext, player: Combatant, opponent: Combatant) -> Timeline:
    out = ctx.console

    def vs_banner():
        ctx.audio.play_sfx(VS_SOUND)
        out.print(Align.center(Text("VS", style="bold red")))

    return [
        (0.5, lambda: out.print(Align.left(versus_card(player)))),
        (1.5, vs_banner),
        (2.0, lambda: out.print(Align.right(versus_card(opponent)))),
        (4.0, lambda: out.print(Text("Get ready...", style="dim"))),
    ]


def run_versus(ctx: GameContext) -> Tuple[Combatant, Combatant]:
    player = load_selection(ctx.store)
    if player is None:
        raise MissingCombatantError([SELECTED_KEY])

    opponent = pick_opponent(load_roster(), player, ctx.rng, ctx.shiny_rate)
    logger.info("OpponentDrawn", player=player.name, opponent=opponent.name, shiny=opponent.shiny)

    elapsed = 0.0
    for at, step in _timeline(ctx, player, opponent):
        ctx.wait(at - elapsed)
        elapsed = at
        step()

    save_matchup(ctx.store, player, opponent, ctx.ttl)
    return player, opponent


__all__ = ["run_versus"]
