#!/usr/bin/env python3
"""
Pokémon versus battle - terminal edition

Thin wrapper around :mod:`pokeduel.cli`: choose a Pokémon, watch the versus
presentation, then fight with attack / special / heal until one side faints.

To run: python main.py [--auto] [--seed N] [--fast]
"""
import sys

from pokeduel.cli import run

if __name__ == "__main__":
    sys.exit(run())
