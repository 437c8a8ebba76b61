import json
import pytest

from pokeduel.core.errors import MissingCombatantError, ValidationError
from pokeduel.system.store import (
    MemoryStore, JsonFileStore, OPPONENT_KEY, PLAYER_KEY, SELECTED_KEY,
    load_matchup, load_selection, save_matchup, save_selection,
)
from tests.helpers import make_combatant


class Clock:
    def __init__(self, now=1000.0):
        self.now = now
    def __call__(self):
        return self.now


@pytest.fixture(params=["memory", "file"])
def store_and_clock(request, tmp_path):
    clock = Clock()
    if request.param == "memory":
        return MemoryStore(clock), clock
    return JsonFileStore(tmp_path / "store.json", clock), clock


def test_put_get_delete(store_and_clock):
    store, _ = store_and_clock
    store.put("k", {"a": 1}, ttl=60)
    assert store.get("k") == {"a": 1}
    store.delete("k")
    assert store.get("k") is None


def test_entries_expire_after_ttl(store_and_clock):
    store, clock = store_and_clock
    store.put("k", "v", ttl=60)
    clock.now += 59
    assert store.get("k") == "v"
    clock.now += 1
    assert store.get("k") is None


def test_non_positive_ttl_rejected(store_and_clock):
    store, _ = store_and_clock
    with pytest.raises(ValidationError):
        store.put("k", "v", ttl=0)


def test_file_store_survives_new_instance(tmp_path):
    clock = Clock()
    JsonFileStore(tmp_path / "s.json", clock).put("k", [1, 2], ttl=10)
    assert JsonFileStore(tmp_path / "s.json", clock).get("k") == [1, 2]


def test_file_store_unreadable_file_reads_empty(tmp_path):
    path = tmp_path / "s.json"
    path.write_text("{not json")
    store = JsonFileStore(path)
    assert store.get("k") is None
    store.put("k", 1)
    assert json.loads(path.read_text())["k"]["value"] == 1


def test_selection_round_trip_keeps_shiny_and_sprite():
    store = MemoryStore()
    mon = make_combatant("Pikachu", shiny=True, img="img/shiny-sprite/pikachu.gif")
    save_selection(store, mon)
    loaded = load_selection(store)
    assert loaded == mon
    assert loaded is not mon


def test_load_selection_missing_or_malformed():
    store = MemoryStore()
    assert load_selection(store) is None
    store.put(SELECTED_KEY, {"name": "Broken"})
    assert load_selection(store) is None
    store.put(SELECTED_KEY, "not a record")
    assert load_selection(store) is None


def test_matchup_requires_both_combatants():
    store = MemoryStore()
    with pytest.raises(MissingCombatantError) as exc:
        load_matchup(store)
    assert set(exc.value.keys) == {PLAYER_KEY, OPPONENT_KEY}

    store.put(PLAYER_KEY, make_combatant("A").to_dict())
    with pytest.raises(MissingCombatantError) as exc:
        load_matchup(store)
    assert exc.value.keys == (OPPONENT_KEY,)


def test_matchup_round_trip():
    store = MemoryStore()
    a, b = make_combatant("A"), make_combatant("B", hp=70)
    save_matchup(store, a, b)
    pa, pb = load_matchup(store)
    assert (pa.name, pb.name) == ("A", "B")
    assert pb.hp == 70 and pb.max_hp is None
