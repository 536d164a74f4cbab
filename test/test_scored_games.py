"""Unit tests for guessing-game, four-statements and final-quiz."""

import random

import pytest

from show_runner.content.questions import format_number
from show_runner.games.final_quiz import BETTING, JUDGING, QUESTION, FinalQuizMachine
from show_runner.games.four_statements import FourStatementsMachine
from show_runner.games.guessing_game import GuessingGameMachine, evaluate_guesses
from show_runner.ledger import ScoreLedger
from show_runner.models.game import parse_game_config
from show_runner.models.state import Team
from show_runner.persistence import InMemoryStore


class TestGuessing:
    def test_closer_guess_wins(self):
        result = evaluate_guesses(100, "90", "92")
        assert result.winner is Team.TEAM2
        assert result.verdict == "Team 2 ist näher dran!"

    def test_equal_distance_is_a_tie(self):
        result = evaluate_guesses(100, 95, 105)
        assert result.winner is None
        assert result.verdict == "Gleichstand!"

    def test_blank_guess_counts_as_zero(self):
        result = evaluate_guesses(10, "", "3")
        assert result.team1_guess == 0
        assert result.winner is Team.TEAM2

    def test_forward_is_ignored_until_guesses_submitted(self):
        config = parse_game_config({
            "type": "guessing-game",
            "questions": [{"question": "Q0", "answer": 1}, {"question": "Q1", "answer": 1000}],
        })
        done = []
        machine = GuessingGameMachine(config, lambda: done.append(True))
        machine.forward()
        assert machine.view()["phase"] == "question"
        machine.submit_guesses(1, 2)
        machine.forward()
        assert machine.view()["questionIndex"] == 1
        machine.submit_guesses("1500", "999,5")
        view = machine.view()
        assert view["answer"] == "1.000"
        assert view["team1Guess"] == "1.500"
        assert view["winner"] == "team2"
        machine.forward()
        assert done == [True]

    def test_submit_twice_is_refused(self):
        config = parse_game_config({"type": "guessing-game", "questions": [{"question": "Q", "answer": 5}]})
        machine = GuessingGameMachine(config, lambda: None)
        assert machine.submit_guesses(1, 2) is not None
        assert machine.submit_guesses(5, 5) is None

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1234567, "1.234.567"),
            (-4500, "-4.500"),
            (2.5, "2,5"),
            (0, "0"),
            (1e-05, "0,00001"),
            (0.1 + 0.2, "0,3"),
            (1234567.25, "1.234.567,25"),
        ],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_tiny_guess_renders_in_fixed_point(self):
        config = parse_game_config({"type": "guessing-game", "questions": [{"question": "Q", "answer": 3}]})
        machine = GuessingGameMachine(config, lambda: None)
        machine.submit_guesses("0,00001", "3")
        view = machine.view()
        assert view["team1Guess"] == "0,00001"
        assert view["team1Diff"] == "2,99999"
        assert view["winner"] == "team2"


def four_statements(n=2):
    questions = [
        {
            "Frage": f"F{i}",
            "trueStatements": [f"t{i}a", f"t{i}b", f"t{i}c"],
            "wrongStatement": f"w{i}",
        }
        for i in range(n)
    ]
    return parse_game_config({"type": "four-statements", "questions": questions})


class TestFourStatements:
    def test_reveal_sequence(self):
        machine = FourStatementsMachine(four_statements(), lambda: None, rng=random.Random(0))
        for _ in range(4):
            machine.forward()
        view = machine.view()
        assert len(view["statements"]) == 4
        assert view["answerShown"] is False
        assert all("isWrong" not in s for s in view["statements"])
        machine.forward()
        view = machine.view()
        assert view["answerShown"] is True
        assert sum(s["isWrong"] for s in view["statements"]) == 1
        machine.forward()
        assert machine.view()["questionIndex"] == 1
        assert machine.view()["statements"] == []

    def test_shuffle_is_stable_across_backward(self):
        machine = FourStatementsMachine(four_statements(), lambda: None, rng=random.Random(5))
        for _ in range(6):
            machine.forward()
        machine.backward()
        view = machine.view()
        assert view["questionIndex"] == 0
        assert view["answerShown"] is True
        assert len(view["statements"]) == 4
        order = [s["text"] for s in view["statements"]]
        machine.backward()
        machine.backward()
        machine.forward()
        machine.forward()
        assert [s["text"] for s in machine.view()["statements"]] == order

    def test_backward_unreveals_one_at_a_time(self):
        machine = FourStatementsMachine(four_statements(), lambda: None)
        machine.forward()
        machine.forward()
        machine.backward()
        assert machine.view()["revealedCount"] == 1

    def test_completes_after_last_question(self):
        done = []
        machine = FourStatementsMachine(four_statements(1), lambda: done.append(True))
        for _ in range(6):
            machine.forward()
        assert done == [True]


def final_quiz(n=3):
    questions = [{"question": f"Q{i}", "answer": f"A{i}"} for i in range(n)]
    return parse_game_config({"type": "final-quiz", "questions": questions})


def to_judging(machine, bet1=10, bet2=5):
    machine.forward()
    assert machine.phase == BETTING
    assert machine.submit_bets(bet1, bet2) is True
    assert machine.phase == JUDGING


class TestFinalQuiz:
    def setup_method(self):
        self.ledger = ScoreLedger(InMemoryStore())

    def skip_example(self, machine):
        to_judging(machine)
        machine.judge(Team.TEAM1, True)
        machine.judge(Team.TEAM2, True)
        machine.forward()

    def test_example_is_never_scored(self):
        machine = FinalQuizMachine(final_quiz(), lambda: None, self.ledger)
        to_judging(machine)
        machine.judge(Team.TEAM1, True)
        machine.judge(Team.TEAM2, False)
        assert (self.ledger.team1_points, self.ledger.team2_points) == (0, 0)

    def test_correct_then_incorrect_nets_minus_bet(self):
        machine = FinalQuizMachine(final_quiz(), lambda: None, self.ledger)
        self.skip_example(machine)
        to_judging(machine, bet1=10)
        machine.judge(Team.TEAM1, True)
        assert self.ledger.team1_points == 10
        machine.judge(Team.TEAM1, False)
        assert self.ledger.team1_points == -10

    def test_rejudging_same_result_does_not_double_count(self):
        machine = FinalQuizMachine(final_quiz(), lambda: None, self.ledger)
        self.skip_example(machine)
        to_judging(machine, bet2=7)
        machine.judge(Team.TEAM2, True)
        machine.judge(Team.TEAM2, True)
        assert self.ledger.team2_points == 7

    def test_forward_needs_both_teams_judged(self):
        machine = FinalQuizMachine(final_quiz(), lambda: None, self.ledger)
        to_judging(machine)
        machine.judge(Team.TEAM1, True)
        machine.forward()
        assert machine.index == 0
        assert machine.view()["nextEnabled"] is False
        machine.judge(Team.TEAM2, False)
        machine.forward()
        assert machine.index == 1
        assert machine.phase == QUESTION

    def test_blank_bets_count_as_zero(self):
        machine = FinalQuizMachine(final_quiz(), lambda: None, self.ledger)
        self.skip_example(machine)
        to_judging(machine, bet1="", bet2="abc")
        machine.judge(Team.TEAM1, False)
        machine.judge(Team.TEAM2, True)
        assert (self.ledger.team1_points, self.ledger.team2_points) == (0, 0)

    def test_completes_after_last_question(self):
        done = []
        machine = FinalQuizMachine(final_quiz(2), lambda: done.append(True), self.ledger)
        self.skip_example(machine)
        to_judging(machine)
        machine.judge("team1", True)
        machine.judge("team2", True)
        machine.forward()
        assert done == [True]
        assert self.ledger.team1_points == 10
        assert self.ledger.team2_points == 5

    def test_judge_outside_judging_is_refused(self):
        machine = FinalQuizMachine(final_quiz(), lambda: None, self.ledger)
        assert machine.judge(Team.TEAM1, True) is False
        assert machine.submit_bets(1, 1) is False
