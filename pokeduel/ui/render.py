"""Rich renderables for the three stages: roster cards, HP panels, combat log."""
from __future__ import annotations
from typing import Literal, Optional, Sequence

from rich.align import Align
from rich.box import DOUBLE, ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pokeduel.battle.models import Combatant
from pokeduel.core.types import format_types

console = Console()

HpTier = Literal["high", "medium", "low"]
_TIER_COLORS = {"high": "green", "medium": "yellow", "low": "red"}
SHINY_MARK = "✨"


def hp_tier(hp: float, max_hp: float) -> HpTier:
    pct = (hp / max_hp) * 100 if max_hp > 0 else 0
    if pct > 80:
        return "high"
    if pct > 40:
        return "medium"
    return "low"


def _num(v: float) -> str:
    return str(int(v)) if float(v).is_integer() else f"{v:g}"


def hp_bar(hp: float, max_hp: float, width: int = 24) -> str:
    hp = max(0, min(hp, max_hp))
    ratio = hp / max_hp if max_hp > 0 else 0
    filled = int(round(ratio * width))
    color = _TIER_COLORS[hp_tier(hp, max_hp)]
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * (width - filled)}[/dim]"


def display_name(c: Combatant) -> str:
    return f"{c.name} {SHINY_MARK}" if c.shiny else c.name


def details_panel(c: Optional[Combatant]) -> Panel:
    """Stat sheet shown beside the roster while choosing."""
    if c is None:
        return Panel("Pick a Pokémon to see its details.", title="Details", box=ROUNDED)
    body = Table.grid(padding=(0, 2))
    body.add_row("[bold]Types[/bold]", format_types(c.types))
    body.add_row("[bold]Attack[/bold]", _num(c.attack))
    body.add_row("[bold]Defense[/bold]", _num(c.defense))
    body.add_row("[bold]HP[/bold]", _num(c.hp))
    rows = [body]
    if c.shiny:
        rows.append(Text(f"{SHINY_MARK} Shiny {SHINY_MARK}", style="bold gold1"))
    rows.append(Text(c.img, style="dim"))
    return Panel(Group(*rows), title=display_name(c), box=ROUNDED)


def roster_table(cards: Sequence[Combatant]) -> Table:
    table = Table(title="Choose your Pokémon", box=ROUNDED, show_lines=False)
    table.add_column("#", justify="right", style="bold")
    table.add_column("Name")
    table.add_column("Types")
    table.add_column("ATK", justify="right")
    table.add_column("DEF", justify="right")
    table.add_column("HP", justify="right")
    for i, c in enumerate(cards, 1):
        name = f"[gold1]{display_name(c)}[/gold1]" if c.shiny else c.name
        table.add_row(str(i), name, format_types(c.types, short=True),
                      _num(c.attack), _num(c.defense), _num(c.hp))
    return table


def combatant_panel(c: Combatant, role: str, *, fainted: bool = False) -> Panel:
    max_hp = c.max_hp if c.max_hp is not None else c.hp
    tier = hp_tier(c.hp, max_hp)
    lines = Table.grid(padding=(0, 1))
    lines.add_row(format_types(c.types, short=True))
    lines.add_row(f"{hp_bar(c.hp, max_hp)} {_num(c.hp)}/{_num(max_hp)}")
    title = display_name(c)
    if fainted:
        title += " [red](fainted)[/red]"
    return Panel(lines, title=title, subtitle=role, border_style=_TIER_COLORS[tier], box=ROUNDED)


def battle_view(player: Combatant, opponent: Combatant, *, fainted_role: Optional[str] = None) -> Group:
    return Group(
        Align.right(combatant_panel(opponent, "opponent", fainted=fainted_role == "opponent")),
        Align.left(combatant_panel(player, "player", fainted=fainted_role == "player")),
    )


def log_panel(lines: Sequence[str], limit: int = 6) -> Panel:
    tail = list(lines)[-limit:]
    body = "\n".join(f"• {line}" for line in tail) or "[dim]The battle begins![/dim]"
    return Panel(body, title="Combat log", box=ROUNDED)


def versus_card(c: Combatant) -> Panel:
    return Panel(Align.center(Text.from_markup(f"{c.img}\n\nTypes: {format_types(c.types)}")),
                 title=display_name(c), box=ROUNDED, width=36)


def popup(message: str) -> Panel:
    return Panel(Align.center(Text(message, style="bold")), box=DOUBLE, border_style="bright_yellow")


__all__ = ["console", "hp_tier", "hp_bar", "display_name", "details_panel", "roster_table",
           "combatant_panel", "battle_view", "log_panel", "versus_card", "popup"]
