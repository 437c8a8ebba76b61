"""Elemental type metadata: colors & abbreviations for the roster's types.

Provides:
  TYPE_COLORS_HEX: mapping type -> hex color string (#RRGGBB)
  TYPE_ABBREVIATIONS: mapping type -> 3-letter abbreviation (upper)
  helpers producing rich markup for type labels.
"""
from __future__ import annotations
from typing import Dict, Sequence

TYPE_COLORS_HEX: Dict[str, str] = {
    "normal": "#A8A77A",
    "fire": "#EE8130",
    "water": "#6390F0",
    "electric": "#F7D02C",
    "grass": "#7AC74C",
    "ice": "#96D9D6",
    "fighting": "#C22E28",
    "poison": "#A33EA1",
    "ground": "#E2BF65",
    "flying": "#A98FF3",
    "psychic": "#F95587",
    "bug": "#A6B91A",
    "rock": "#B6A136",
    "ghost": "#735797",
    "dragon": "#6F35FC",
    "dark": "#705746",
    "steel": "#B7B7CE",
    "fairy": "#D685AD",
}

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "normal": "NRM",
    "fire": "FIR",
    "water": "WTR",
    "grass": "GRS",
    "electric": "ELE",
    "ice": "ICE",
    "fighting": "FGT",
    "poison": "PSN",
    "ground": "GRN",
    "flying": "FLY",
    "psychic": "PSY",
    "bug": "BUG",
    "rock": "RCK",
    "ghost": "GHO",
    "dragon": "DRA",
    "dark": "DRK",
    "steel": "STL",
    "fairy": "FRY",
}

def type_abbreviation(type_name: str) -> str:
    return TYPE_ABBREVIATIONS.get(type_name.lower(), type_name[:3].upper())

def type_markup(type_name: str, text: str | None = None) -> str:
    text = text if text is not None else type_name.capitalize()
    hex_val = TYPE_COLORS_HEX.get(type_name.lower())
    if not hex_val:
        return text
    return f"[{hex_val}]{text}[/{hex_val}]"

def format_types(types: Sequence[str], *, short: bool = False) -> str:
    parts = [type_markup(t, type_abbreviation(t) if short else None) for t in types]
    return ('/' if short else ', ').join(parts)

__all__ = ['TYPE_COLORS_HEX','TYPE_ABBREVIATIONS','type_abbreviation','type_markup','format_types']
