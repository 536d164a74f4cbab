"""Unit tests for the reveal-then-advance play machines."""

import random

from show_runner.errors import MediaPlaybackError
from show_runner.games.audio_guess import AudioGuessMachine, audio_sources
from show_runner.games.fact_or_fake import FactOrFakeMachine
from show_runner.games.image_game import ImageGameMachine
from show_runner.games.simple_quiz import SimpleQuizMachine
from show_runner.models.game import parse_game_config
from show_runner.models.state import Intent


def simple_quiz(n=3, **extra):
    questions = [{"question": f"Q{i}", "answer": f"A{i}"} for i in range(n)]
    return parse_game_config({"type": "simple-quiz", "title": "Quiz", "questions": questions, **extra})


class Completion:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


class TestSimpleQuiz:
    def test_example_label_and_counter(self):
        machine = SimpleQuizMachine(simple_quiz(4), Completion())
        assert machine.view()["label"] == "Beispiel Frage"
        assert machine.view()["isExample"] is True
        machine.forward()
        machine.forward()
        assert machine.view()["label"] == "Frage 1 von 3"
        assert machine.total_questions == 3

    def test_reveal_then_advance_then_complete_once(self):
        done = Completion()
        machine = SimpleQuizMachine(simple_quiz(2), done)
        machine.forward()
        assert machine.view()["answer"] == "A0"
        machine.forward()
        assert machine.view()["question"] == "Q1"
        assert "answer" not in machine.view()
        machine.forward()
        machine.forward()
        assert done.calls == 1
        machine.forward()
        assert done.calls == 1

    def test_backward_hides_answer_then_returns_to_previous_revealed(self):
        machine = SimpleQuizMachine(simple_quiz(3), Completion())
        machine.forward()
        machine.forward()
        machine.forward()
        machine.backward()
        assert machine.view()["questionIndex"] == 1
        assert machine.view()["answerShown"] is False
        machine.backward()
        assert machine.view()["questionIndex"] == 0
        assert machine.view()["answerShown"] is True

    def test_backward_then_forward_restores_identical_view(self):
        machine = SimpleQuizMachine(simple_quiz(3), Completion())
        machine.forward()
        machine.forward()
        before = machine.view()
        machine.backward()
        machine.forward()
        assert machine.view() == before

    def test_backward_on_example_is_a_no_op(self):
        machine = SimpleQuizMachine(simple_quiz(2), Completion())
        before = machine.view()
        machine.backward()
        assert machine.view() == before

    def test_timer_runs_while_answer_hidden(self):
        config = parse_game_config({
            "type": "simple-quiz",
            "questions": [{"question": "Q0", "answer": "A0", "timer": 30}],
        })
        machine = SimpleQuizMachine(config, Completion())
        assert machine.view()["timer"] == {"seconds": 30, "running": True}
        machine.forward()
        assert machine.view()["timer"]["running"] is False
        machine.backward()
        assert machine.timer_running is True
        machine.timer_expired()
        assert machine.timer_running is False

    def test_replace_image_hides_question_image_on_reveal(self):
        config = parse_game_config({
            "type": "simple-quiz",
            "questions": [{
                "question": "Wer ist das?",
                "answer": "X",
                "questionImage": "/q.png",
                "answerImage": "/a.png",
                "replaceImage": True,
            }],
        })
        machine = SimpleQuizMachine(config, Completion())
        assert machine.view()["questionImage"] == "/q.png"
        machine.forward()
        view = machine.view()
        assert view["questionImage"] is None
        assert view["answerImage"] == "/a.png"

    def test_randomize_keeps_example_first(self):
        machine = SimpleQuizMachine(simple_quiz(8, randomizeQuestions=True), Completion(), rng=random.Random(1))
        assert machine.questions[0].question == "Q0"
        assert sorted(q.question for q in machine.questions) == sorted(f"Q{i}" for i in range(8))

    def test_teardown_ignores_further_input(self):
        done = Completion()
        machine = SimpleQuizMachine(simple_quiz(1), done)
        machine.teardown()
        machine.on_intent(Intent.FORWARD)
        machine.on_intent(Intent.FORWARD)
        assert done.calls == 0
        assert machine.active is False


class TestFactOrFake:
    def test_verdict_from_answer_or_is_fact(self):
        config = parse_game_config({
            "type": "fact-or-fake",
            "questions": [
                {"statement": "S0", "isFact": True},
                {"statement": "S1", "answer": "FAKE", "description": "Stimmt nicht."},
            ],
        })
        machine = FactOrFakeMachine(config, Completion())
        machine.forward()
        assert machine.view()["answer"] == "FAKT"
        assert machine.view()["isFact"] is True
        machine.forward()
        machine.forward()
        view = machine.view()
        assert view["answer"] == "FAKE"
        assert view["description"] == "Stimmt nicht."
        assert view["label"] == "Frage 1 von 1"


class TestImageGame:
    def test_labels_use_bild(self):
        config = parse_game_config({
            "type": "image-game",
            "questions": [
                {"image": "/image-guess/Beispiel_Hund.png", "answer": "Hund", "isExample": True},
                {"image": "/image-guess/Katze.png", "answer": "Katze"},
            ],
        })
        machine = ImageGameMachine(config, Completion())
        assert machine.view()["label"] == "Beispiel"
        machine.forward()
        machine.forward()
        assert machine.view()["label"] == "Bild 1 von 1"
        assert machine.view()["image"] == "/image-guess/Katze.png"


class RecordingClip:
    clips = []

    def __init__(self, source):
        self.source = source
        self.plays = 0
        self.paused = 0
        self.detached = False
        RecordingClip.clips.append(self)

    def play(self):
        if self.detached:
            raise MediaPlaybackError("detached")
        self.plays += 1

    def pause(self):
        self.paused += 1

    def detach(self):
        self.detached = True


def audio_config():
    return parse_game_config({
        "type": "audio-guess",
        "questions": [
            {"folder": "Beispiel_Song", "audioFile": "short.wav", "answer": "Song", "isExample": True},
            {"folder": "Hit Single", "audioFile": "short.wav", "answer": "Hit Single"},
        ],
    })


class TestAudioGuess:
    def setup_method(self):
        RecordingClip.clips = []

    def test_audio_sources_include_fallbacks(self):
        assert audio_sources("Hit Single", "short.wav") == [
            "/audio-guess/Hit%20Single/short.wav",
            "/audio-guess/Hit%20Single/short.mp3",
            "/audio-guess/Hit%20Single/short.opus",
        ]
        assert audio_sources("x", "long.mp3") == ["/audio-guess/x/long.mp3"]

    def test_short_clip_autoplays_and_reveal_plays_long(self):
        machine = AudioGuessMachine(audio_config(), Completion(), clip_factory=RecordingClip)
        short, long_ = machine.short_clip, machine.long_clip
        assert short.source.endswith("/short.wav")
        assert long_.source.endswith("/long.wav")
        assert short.plays == 1
        machine.forward()
        assert long_.plays == 1
        assert short.paused >= 1

    def test_question_change_releases_previous_clips(self):
        machine = AudioGuessMachine(audio_config(), Completion(), clip_factory=RecordingClip)
        first_short, first_long = machine.short_clip, machine.long_clip
        machine.forward()
        machine.forward()
        assert first_short.detached and first_long.detached
        assert machine.short_clip.plays == 1
        assert "Hit%20Single" in machine.short_clip.source

    def test_backward_reenters_previous_with_long_clip(self):
        machine = AudioGuessMachine(audio_config(), Completion(), clip_factory=RecordingClip)
        machine.forward()
        machine.forward()
        machine.backward()
        assert machine.view()["questionIndex"] == 0
        assert machine.view()["answerShown"] is True
        assert machine.long_clip.plays == 1
        assert machine.short_clip.plays == 0

    def test_hiding_answer_replays_short_clip(self):
        machine = AudioGuessMachine(audio_config(), Completion(), clip_factory=RecordingClip)
        machine.forward()
        machine.backward()
        assert machine.short_clip.plays == 2

    def test_teardown_detaches_both_clips(self):
        machine = AudioGuessMachine(audio_config(), Completion(), clip_factory=RecordingClip)
        clips = list(RecordingClip.clips)
        machine.teardown()
        assert all(c.detached for c in clips)
        assert machine.short_clip is None

    def test_playback_failure_does_not_stop_play(self):
        class BrokenClip(RecordingClip):
            def play(self):
                raise MediaPlaybackError("no device")

        done = Completion()
        machine = AudioGuessMachine(audio_config(), done, clip_factory=BrokenClip)
        for _ in range(4):
            machine.forward()
        assert done.calls == 1
