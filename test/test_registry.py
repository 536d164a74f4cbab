"""Unit tests for the play machine factory."""

import pytest

from show_runner.games.base import PlayMachine
from show_runner.games.registry import MACHINES, create_play_machine
from show_runner.ledger import ScoreLedger
from show_runner.models.game import GAME_CONFIG_MODELS, parse_game_config
from show_runner.models.state import Intent
from show_runner.persistence import InMemoryStore


def test_every_game_type_has_a_machine():
    assert set(MACHINES) == set(GAME_CONFIG_MODELS)


@pytest.mark.parametrize("game_type", sorted(GAME_CONFIG_MODELS))
def test_factory_builds_matching_machine(game_type):
    config = parse_game_config({"type": game_type})
    machine = create_play_machine(config, lambda: None, ledger=ScoreLedger(InMemoryStore()))
    assert isinstance(machine, MACHINES[game_type])
    assert machine.view()["gameType"] == game_type


@pytest.mark.parametrize("game_type", ["final-quiz", "quizjagd"])
def test_scoring_variants_need_a_ledger(game_type):
    with pytest.raises(ValueError):
        create_play_machine(parse_game_config({"type": game_type}), lambda: None)


@pytest.mark.parametrize("game_type", sorted(GAME_CONFIG_MODELS))
def test_backward_flag_matches_implementation(game_type):
    cls = MACHINES[game_type]
    assert cls.supports_backward == (cls.backward is not PlayMachine.backward)


class RecordingMachine(PlayMachine):
    game_type = "recording"

    def __init__(self):
        super().__init__(None, lambda: None)
        self.calls = []

    def forward(self):
        self.calls.append("forward")

    def backward(self):
        self.calls.append("backward")

    def view(self):
        return {}


def test_backward_intent_needs_supports_backward():
    machine = RecordingMachine()
    machine.on_intent(Intent.BACKWARD)
    assert machine.calls == []
    machine.supports_backward = True
    machine.on_intent(Intent.BACKWARD)
    machine.on_intent(Intent.FORWARD)
    assert machine.calls == ["backward", "forward"]
