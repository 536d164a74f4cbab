"""Unit tests for input routing."""

from show_runner.input_router import (
    InputRouter,
    is_interactive_click,
    parse_event_json,
)
from show_runner.models.state import Intent


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def make_router(**kwargs):
    clock = FakeClock()
    router = InputRouter(clock=clock, **kwargs)
    received = []
    router.subscribe("test", received.append)
    return router, clock, received


def key(name, repeat=False):
    return {"type": "keydown", "key": name, "repeat": repeat}


def test_parse_event_json():
    assert parse_event_json('{"type": "click"}') == {"type": "click"}
    assert parse_event_json("{") is None
    assert parse_event_json("[]") is None
    assert parse_event_json(None) is None


def test_arrow_keys_map_to_intents():
    router, clock, received = make_router()
    assert router.route(key("ArrowRight")) is Intent.FORWARD
    assert router.route(key("ArrowLeft")) is Intent.BACKWARD
    assert router.route(key("Enter")) is None
    assert received == [Intent.FORWARD, Intent.BACKWARD]


def test_custom_keys():
    router, clock, received = make_router(forward_keys=(" ",), backward_keys=("Backspace",))
    assert router.route(key(" ")) is Intent.FORWARD
    assert router.route(key("ArrowRight")) is None
    assert router.route(key("Backspace")) is Intent.BACKWARD


def test_held_key_repeat_is_suppressed():
    router, clock, received = make_router()
    assert router.route(key("ArrowRight", repeat=True)) is None
    assert received == []


def test_json_encoded_events_are_accepted():
    router, clock, received = make_router()
    assert router.route('{"type": "keydown", "key": "ArrowRight"}') is Intent.FORWARD
    assert router.route("not json") is None


class TestClicks:
    """Click-originated forward intents."""

    def test_click_on_play_area_is_forward(self):
        router, clock, received = make_router()
        event = {"type": "click", "path": [{"tag": "div"}, {"tag": "main"}]}
        assert router.route(event) is Intent.FORWARD

    def test_click_inside_button_is_suppressed(self):
        event = {"type": "click", "path": [{"tag": "span"}, {"tag": "button"}, {"tag": "div"}]}
        assert is_interactive_click(event) is True
        router, clock, received = make_router()
        assert router.route(event) is None
        assert received == []

    def test_role_button_image_and_music_widget_are_suppressed(self):
        assert is_interactive_click({"type": "click", "target": {"tag": "div", "role": "button"}})
        assert is_interactive_click({"type": "click", "target": {"tag": "img"}})
        assert is_interactive_click({"type": "click", "target": {"tag": "textarea"}})
        assert is_interactive_click(
            {"type": "click", "path": [{"tag": "span"}, {"tag": "div", "classes": "music-controls open"}]}
        )
        assert not is_interactive_click({"type": "click", "target": {"tag": "p", "classes": ["question"]}})

    def test_viewer_open_suppresses_everything(self):
        router, clock, received = make_router()
        router.open_viewer()
        assert router.route(key("ArrowRight")) is None
        assert router.route(key("ArrowLeft")) is None
        assert router.route({"type": "click", "target": {"tag": "div"}}) is None
        router.close_viewer()
        assert router.route(key("ArrowRight")) is Intent.FORWARD


class TestDebounce:
    """Duplicate intents inside the window are dropped."""

    def test_same_intent_within_window_is_dropped(self):
        router, clock, received = make_router(debounce_sec=0.1)
        assert router.route(key("ArrowRight")) is Intent.FORWARD
        clock.now += 0.05
        assert router.route({"type": "click", "target": {"tag": "div"}}) is None
        clock.now += 0.06
        assert router.route(key("ArrowRight")) is Intent.FORWARD
        assert received == [Intent.FORWARD, Intent.FORWARD]

    def test_different_intents_do_not_debounce_each_other(self):
        router, clock, received = make_router(debounce_sec=0.1)
        router.route(key("ArrowRight"))
        assert router.route(key("ArrowLeft")) is Intent.BACKWARD

    def test_suppressed_intents_do_not_start_the_window(self):
        router, clock, received = make_router(debounce_sec=0.1)
        router.open_viewer()
        router.route(key("ArrowRight"))
        router.close_viewer()
        assert router.route(key("ArrowRight")) is Intent.FORWARD


class TestOwnership:
    """Handler handoff between phases."""

    def test_subscribe_revokes_previous_lease(self):
        router = InputRouter(clock=FakeClock())
        first, second = [], []
        lease1 = router.subscribe("rules", first.append)
        lease2 = router.subscribe("play", second.append)
        assert lease1.active is False
        assert lease2.active is True
        assert router.owner == "play"
        router.dispatch(Intent.FORWARD)
        assert first == []
        assert second == [Intent.FORWARD]

    def test_guarded_callback_is_dropped_after_handoff(self):
        router = InputRouter(clock=FakeClock())
        fired = []
        lease = router.subscribe("rules", lambda intent: None)
        callback = lease.guard(lambda: fired.append("late"))
        router.subscribe("play", lambda intent: None)
        assert callback() is None
        assert fired == []

    def test_no_owner_means_nothing_is_delivered_or_queued(self):
        router = InputRouter(clock=FakeClock())
        lease = router.subscribe("scoring", lambda intent: None)
        router.release(lease)
        assert router.owner is None
        assert router.route(key("ArrowRight")) is None
        received = []
        router.subscribe("next", received.append)
        assert received == []

    def test_release_of_stale_lease_keeps_current_owner(self):
        router = InputRouter(clock=FakeClock())
        old = router.subscribe("old", lambda intent: None)
        router.subscribe("new", lambda intent: None)
        router.release(old)
        assert router.owner == "new"
