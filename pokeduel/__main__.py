import sys

from pokeduel.cli import run

sys.exit(run())
