import pytest

from pad_system import ButtonId, ButtonState, ButtonStateSink


def send(sink, frame):
    for button, pressed in frame:
        sink.signal(button, pressed)
    sink.end_frame()


@pytest.mark.unittest
class TestButtonState:
    def test_edges(self):
        state = ButtonState(
            buttons=[ButtonId.BTN_A, ButtonId.BTN_B, ButtonId.BTN_X],
            for_button=[True, False, True],
            previous_state_of=[False, True, True],
        )
        assert state.was_changed == [True, True, False]
        assert state.just_pressed == [ButtonId.BTN_A]
        assert state.just_released == [ButtonId.BTN_B]
        assert state.pressed_buttons == [ButtonId.BTN_A, ButtonId.BTN_X]
        assert state.total_buttons_pressed == 2
        assert state.any_changed
        assert state.is_pressed(ButtonId.BTN_X)

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            ButtonState([ButtonId.BTN_A], [True, False], [False, False])

    def test_non_bool_values(self):
        with pytest.raises(TypeError):
            ButtonState([ButtonId.BTN_A], [1], [False])


@pytest.mark.unittest
class TestButtonStateSink:
    def test_listener_gets_changed_frames_only(self, logger):
        sink = ButtonStateSink(logger)
        seen = []
        sink.register_listener(seen.append)

        send(sink, [(ButtonId.BTN_A, False), (ButtonId.BTN_B, False)])
        send(sink, [(ButtonId.BTN_A, True), (ButtonId.BTN_B, False)])
        send(sink, [(ButtonId.BTN_A, True), (ButtonId.BTN_B, False)])
        send(sink, [(ButtonId.BTN_A, False), (ButtonId.BTN_B, False)])

        assert sink.frames == 4
        assert [s.just_pressed for s in seen] == [[ButtonId.BTN_A], []]
        assert [s.just_released for s in seen] == [[], [ButtonId.BTN_A]]
        assert sink.press_counts == {ButtonId.BTN_A: 1}

    def test_notify_unchanged(self, logger):
        sink = ButtonStateSink(logger, notify_unchanged=True)
        seen = []
        sink.register_listener(seen.append)

        send(sink, [(ButtonId.BTN_A, False)])
        send(sink, [(ButtonId.BTN_A, False)])

        assert len(seen) == 2

    def test_failing_listener_does_not_break_frames(self, logger):
        sink = ButtonStateSink(logger)

        def broken(state):
            raise RuntimeError("listener bug")

        later = []
        sink.register_listener(broken)
        sink.register_listener(later.append)

        send(sink, [(ButtonId.BTN_START, True)])

        assert len(later) == 1
        assert sink.latest.is_pressed(ButtonId.BTN_START)
