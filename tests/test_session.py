import io
import random
import pytest

from pokeduel.battle.events import EventKind
from pokeduel.battle.models import Action, Outcome, Side, TurnState
from pokeduel.battle.session import BattleSession, WIN_MESSAGE, LOSS_MESSAGE
from pokeduel.core.errors import InvalidStateError, ValidationError
from pokeduel.core.logging import Logger
from tests.helpers import make_combatant, FixedRng


def _pair(**opp):
    player = make_combatant("Player", attack=50, defense=30, hp=100)
    opponent = make_combatant("Foe", **{"attack": 40, "defense": 20, "hp": 80, **opp})
    return player, opponent


def test_session_captures_max_hp_and_starts_on_player_turn():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng())
    assert player.max_hp == 100 and opponent.max_hp == 80
    assert session.state is TurnState.PLAYER_TURN
    assert session.outcome is Outcome.ONGOING


def test_attack_exchange_reproduces_expected_hp():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng(index=0))  # opponent picks attack

    r1 = session.submit("attack")
    assert r1.amount == 30
    assert opponent.hp == 50
    assert r1.state is TurnState.OPPONENT_TURN
    assert r1.message == "Player attacked Foe dealing 30 damage!"

    r2 = session.opponent_turn()
    assert r2.side is Side.OPPONENT and r2.action is Action.ATTACK
    assert r2.amount == 10
    assert player.hp == 90
    assert session.state is TurnState.PLAYER_TURN


def test_player_turn_schedules_opponent_with_delay():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng(), opponent_delay=1.25)
    result = session.submit(Action.SPECIAL)
    kinds = [e.kind for e in result.events]
    assert kinds[0] is EventKind.LOG
    thinking = [e for e in result.events if e.kind is EventKind.OPPONENT_THINKING]
    assert len(thinking) == 1 and thinking[0].delay == 1.25
    assert "special attack" in result.message


def test_actions_rejected_outside_player_turn():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng())
    with pytest.raises(InvalidStateError):
        session.opponent_turn()
    session.submit("attack")
    with pytest.raises(InvalidStateError):
        session.submit("attack")


def test_unknown_action_rejected():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng())
    with pytest.raises(ValidationError):
        session.submit("flee")
    assert session.state is TurnState.PLAYER_TURN


def test_heal_at_full_hp_forfeits_turn_with_log():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng())
    result = session.submit("heal")
    assert result.amount == 0
    assert player.hp == 100
    assert "loses the turn" in result.message
    assert session.log[-1] == result.message
    assert session.state is TurnState.OPPONENT_TURN


def test_repeated_full_hp_heal_always_forfeits(monkeypatch):
    for seed in range(50):
        stream = io.StringIO()
        monkeypatch.setattr("pokeduel.battle.mechanics.logger", Logger("INFO", stream=stream))
        player, opponent = _pair()
        session = BattleSession(player, opponent, random.Random(seed))
        assert session.submit("heal").amount == 0
        assert player.hp == player.max_hp
        assert "HealForfeited name=Player" in stream.getvalue()


def test_opponent_heal_recovers_hp():
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng(index=2, heal=12))  # opponent picks heal
    session.submit("attack")
    assert opponent.hp == 50
    r = session.opponent_turn()
    assert r.action is Action.HEAL
    assert r.amount == 12
    assert opponent.hp == 62
    assert r.message == "Foe healed and recovered 12 HP!"


def test_knockout_is_terminal_with_presentation_events():
    player, opponent = _pair(hp=25)
    session = BattleSession(player, opponent, FixedRng(), popup_delay=3.0)
    result = session.submit("attack")
    assert result.outcome is Outcome.OPPONENT_DEFEATED
    assert session.is_over()
    kinds = [e.kind for e in result.events]
    assert kinds == [EventKind.LOG, EventKind.STOP_MUSIC, EventKind.HP_CHANGED,
                     EventKind.DEFEAT_ANIMATION, EventKind.SHOW_POPUP]
    assert result.events[3].role == "opponent"
    assert result.events[4].message == WIN_MESSAGE
    assert result.events[4].delay == 3.0
    with pytest.raises(InvalidStateError):
        session.submit("attack")
    with pytest.raises(InvalidStateError):
        session.opponent_turn()


def test_player_loss_popup():
    player = make_combatant("Player", attack=10, defense=0, hp=8)
    opponent = make_combatant("Foe", attack=40, defense=50, hp=80)
    session = BattleSession(player, opponent, FixedRng(index=0))
    session.submit("attack")
    result = session.opponent_turn()
    assert result.outcome is Outcome.PLAYER_DEFEATED
    assert player.hp == 0
    popup = [e for e in result.events if e.kind is EventKind.SHOW_POPUP][0]
    assert popup.message == LOSS_MESSAGE


def test_run_auto_reaches_terminal_and_keeps_invariants():
    for seed in range(20):
        player, opponent = _pair()
        session = BattleSession(player, opponent, random.Random(seed))
        outcome = session.run_auto()
        assert outcome is not Outcome.ONGOING
        assert session.state is TurnState.TERMINAL
        for c in (player, opponent):
            assert 0 <= c.hp <= c.max_hp
        # turns alternate, starting with the player
        sides = [r.side for r in session.history]
        assert sides[0] is Side.PLAYER
        assert all(a is not b for a, b in zip(sides, sides[1:]))


def test_message_callback_receives_log_lines():
    seen = []
    player, opponent = _pair()
    session = BattleSession(player, opponent, FixedRng(), message_cb=seen.append)
    session.submit("attack")
    assert seen == session.log


def test_second_session_over_same_records_is_rejected():
    player, opponent = _pair()
    BattleSession(player, opponent, FixedRng()).submit("attack")
    assert opponent.hp == 50
    with pytest.raises(ValidationError):
        BattleSession(player, opponent, FixedRng())
    assert opponent.max_hp == 80


def test_unknown_action_after_battle_end_is_a_state_error():
    player, opponent = _pair(hp=25)
    session = BattleSession(player, opponent, FixedRng())
    session.submit("attack")
    assert session.is_over()
    with pytest.raises(InvalidStateError):
        session.submit("flee")
