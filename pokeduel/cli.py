from __future__ import annotations
import argparse
from typing import Optional, Sequence

from pokeduel.battle.ai import choose_action
from pokeduel.battle.models import Outcome
from pokeduel.core.errors import MissingCombatantError
from pokeduel.core.logging import logger
from pokeduel.game.context import GameContext
from pokeduel.stages.arena import run_arena
from pokeduel.stages.selection import run_selection
from pokeduel.stages.versus import run_versus
from pokeduel.system.settings import Settings, create_rng
from pokeduel.ui.input import confirm

STAGES = ("select", "versus", "arena")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pokeduel", description="Pokémon versus battle in the terminal.")
    p.add_argument("--stage", choices=STAGES, default="select",
                   help="stage to start from (later stages reuse the stored hand-off)")
    p.add_argument("--auto", action="store_true", help="play the player's side randomly, no prompts")
    p.add_argument("--seed", type=int, default=None, help="seed for every random draw")
    p.add_argument("--fast", action="store_true", help="skip all presentation delays")
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARN", "ERROR"], default=None)
    return p


def play(ctx: GameContext, *, start: str = "select", auto: bool = False) -> Optional[Outcome]:
    """Run the stages from ``start`` through the battle.

    A missing hand-off sends the player back to selection, once.
    """
    pick = (lambda cards: cards[ctx.rng.randrange(len(cards))]) if auto else None
    choose = (lambda session: choose_action(ctx.rng)) if auto else None
    stage = STAGES.index(start)
    redirected = False
    while True:
        try:
            if stage <= 0:
                run_selection(ctx, pick=pick)
            if stage <= 1:
                run_versus(ctx)
            return run_arena(ctx, choose=choose)
        except MissingCombatantError as e:
            logger.warn("MissingCombatData", keys=",".join(e.keys))
            if redirected:
                raise
            ctx.console.print("[yellow]Battle data is missing. Back to Pokémon selection.[/yellow]")
            stage = 0
            redirected = True


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    logger.set_level(args.log_level or settings.data.log_level)  # type: ignore[arg-type]
    if args.fast:
        settings.data.pacing = 0.0
    ctx = GameContext(settings, rng=create_rng(args.seed))

    start = args.stage
    while True:
        play(ctx, start=start, auto=args.auto)
        if args.auto or not confirm("Play again?", default=True, console=ctx.console, reader=ctx.reader):
            break
        start = "select"
    ctx.audio.stop_music()
    return 0
