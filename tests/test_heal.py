import io
import random

from pokeduel.battle.mechanics import heal, HEAL_RANGE
from pokeduel.core.logging import Logger
from tests.helpers import make_combatant, FixedRng


def _wounded(hp=40, max_hp=100):
    c = make_combatant(hp=max_hp)
    c.begin_battle()
    c.hp = hp
    return c


def test_heal_within_bounds_and_never_above_max():
    for seed in range(200):
        c = _wounded(hp=40)
        healed = heal(c, random.Random(seed))
        assert HEAL_RANGE[0] <= healed <= HEAL_RANGE[1]
        assert c.hp == 40 + healed
        assert c.hp <= c.max_hp


def test_heal_clamped_to_missing_hp():
    for seed in range(200):
        c = _wounded(hp=97)
        healed = heal(c, random.Random(seed))
        assert healed == 3
        assert c.hp == c.max_hp


def test_heal_draws_from_closed_range():
    rng = FixedRng(heal=29)
    c = _wounded(hp=10)
    assert heal(c, rng) == 29
    assert rng.randint_calls == [(10, 29)]


def test_heal_at_full_hp_is_forfeit(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr("pokeduel.battle.mechanics.logger", Logger("INFO", stream=stream))
    for seed in range(100):
        c = _wounded(hp=100)
        assert heal(c, random.Random(seed)) == 0
        assert c.hp == 100
    lines = stream.getvalue().splitlines()
    assert len(lines) == 100
    assert all("HealForfeited name=Testmon hp=100" in line for line in lines)


def test_partial_heal_logs_no_forfeit(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr("pokeduel.battle.mechanics.logger", Logger("DEBUG", stream=stream))
    heal(_wounded(hp=40), FixedRng(heal=15))
    assert "HealForfeited" not in stream.getvalue()


def test_heal_at_full_hp_does_not_touch_rng():
    rng = FixedRng()
    c = _wounded(hp=100)
    heal(c, rng)
    assert rng.randint_calls == []
