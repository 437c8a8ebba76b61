"""
Centralized path helpers (flat layout).
"""
from __future__ import annotations
from pathlib import Path

# This file lives at pokeduel/core/paths.py
ROOT = Path(__file__).resolve().parents[2]   # project root (one up from 'pokeduel')
ASSETS = ROOT / "assets"
SCHEMA = ROOT / "schema"
POKEMON = ASSETS / "pokemon"
ROSTER_FILE = POKEMON / "roster.json"
COMBATANT_SCHEMA = SCHEMA / "combatant.schema.json"
AUDIO = ASSETS / "audio"
BATTLE_MUSIC = AUDIO / "battle.mp3"
VS_SOUND = AUDIO / "vs.mp3"
