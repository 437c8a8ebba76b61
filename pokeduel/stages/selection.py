"""Stage 1: pick a Pokémon from the roster.

Every card is rolled shiny independently. A selection left over from an
earlier run (still inside its TTL) is offered as the default.
"""
from __future__ import annotations
from typing import Callable, Optional, Sequence

from pokeduel.battle.models import Combatant
from pokeduel.core.logging import logger
from pokeduel.data.roster import load_roster, roll_roster
from pokeduel.game.context import GameContext
from pokeduel.system.store import load_selection, save_selection
from pokeduel.ui.input import get_choice
from pokeduel.ui.render import details_panel, display_name, roster_table

Picker = Callable[[Sequence[Combatant]], Combatant]


def _prompt_pick(ctx: GameContext, cards: Sequence[Combatant], previous: Optional[Combatant]) -> Combatant:
    labels = [display_name(c) for c in cards]
    default = None
    if previous is not None:
        default = "keep"
        ctx.console.print(f"Press Enter to keep [bold]{display_name(previous)}[/bold].")
    choice = get_choice("Which Pokémon will you take into battle?", labels,
                        console=ctx.console, reader=ctx.reader, default=default)
    if choice == "keep" and previous is not None:
        return previous
    return cards[labels.index(choice)]


def run_selection(ctx: GameContext, pick: Optional[Picker] = None) -> Combatant:
    cards = roll_roster(load_roster(), ctx.rng, ctx.shiny_rate)
    previous = load_selection(ctx.store)

    ctx.console.print(roster_table(cards))
    ctx.console.print(details_panel(previous))

    chosen = pick(cards) if pick else _prompt_pick(ctx, cards, previous)
    ctx.console.print(details_panel(chosen))
    save_selection(ctx.store, chosen, ctx.ttl)
    logger.info("SelectionSaved", name=chosen.name, shiny=chosen.shiny)
    return chosen


__all__ = ["run_selection"]
