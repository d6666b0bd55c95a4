import json

import pytest

from pad_system import (
    ButtonId,
    ConfigError,
    JoystickConfig,
    LineMapping,
    PadConfig,
    button_from_name,
    config_from_dict,
    default_config,
    default_pad_config,
    load_config,
    normalize_poll_ms,
)


@pytest.mark.unittest
class TestPollInterval:
    def test_zero_means_default(self):
        assert normalize_poll_ms(0) == 1

    @pytest.mark.parametrize("value", [1, 4, 100])
    def test_positive_values_kept(self, value):
        assert normalize_poll_ms(value) == value

    @pytest.mark.parametrize("value", [-1, 2.5, "3", None, False])
    def test_invalid_values(self, value):
        with pytest.raises(ConfigError):
            normalize_poll_ms(value)


@pytest.mark.unittest
class TestDefaults:
    def test_p1_table(self):
        pad = default_pad_config(0)
        assert [line.name for line in pad.lines] == [
            "up", "down", "left", "right", "start", "select",
            "a", "b", "tr", "y", "x", "tl",
        ]
        assert [line.pin for line in pad.lines] == [2, 15, 25, 20, 8, 7, 23, 22, 21, 16, 13, 12]
        assert all(line.active_low for line in pad.lines)
        assert pad.lines[0].button == ButtonId.BTN_DPAD_UP

    def test_p2_table(self):
        pad = default_pad_config(1)
        assert [line.pin for line in pad.lines] == [9, 3, 4, 11, 17, 24, 19, 18, 14, 10, 5, 6]

    def test_both_pads_fit_together(self):
        config = default_config([0, 1], poll_ms=2)
        assert config.pad_count == 2
        assert config.poll_ms == 2

    def test_unknown_instance(self):
        with pytest.raises(ConfigError):
            default_pad_config(2)


@pytest.mark.unittest
class TestValidation:
    def test_duplicate_instances(self):
        config = JoystickConfig(pads=[default_pad_config(0), default_pad_config(0)])
        with pytest.raises(ConfigError):
            config.validate()

    def test_too_many_pads(self):
        pads = [PadConfig(instance=i, lines=[LineMapping(f"l{i}", ButtonId.BTN_A)]) for i in range(3)]
        with pytest.raises(ConfigError):
            JoystickConfig(pads=pads).validate()

    def test_no_pads(self):
        with pytest.raises(ConfigError):
            JoystickConfig(pads=[]).validate()

    def test_pin_shared_between_lines(self):
        pad = PadConfig(lines=[
            LineMapping("up", ButtonId.BTN_DPAD_UP, pin=4),
            LineMapping("down", ButtonId.BTN_DPAD_DOWN, pin=4),
        ])
        with pytest.raises(ConfigError):
            pad.validate()

    def test_pin_out_of_range(self):
        pad = PadConfig(lines=[LineMapping("up", ButtonId.BTN_DPAD_UP, pin=40)])
        with pytest.raises(ConfigError):
            pad.validate()

    def test_unwired_lines_are_allowed(self):
        pad = PadConfig(lines=[
            LineMapping("up", ButtonId.BTN_DPAD_UP, pin=4),
            LineMapping("home", ButtonId.BTN_MODE, pin=None),
        ])
        pad.validate()
        assert pad.pins == {"up": 4, "home": None}

    def test_pin_shared_between_pads(self):
        p1 = PadConfig(instance=0, lines=[LineMapping("up", ButtonId.BTN_DPAD_UP, pin=4)])
        p2 = PadConfig(instance=1, lines=[LineMapping("up", ButtonId.BTN_DPAD_UP, pin=4)])
        with pytest.raises(ConfigError):
            JoystickConfig(pads=[p1, p2]).validate()

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            normalize_poll_ms(-5)


@pytest.mark.unittest
class TestButtonNames:
    @pytest.mark.parametrize("name, expected", [
        ("BTN_A", ButtonId.BTN_A),
        ("a", ButtonId.BTN_A),
        ("dpad_up", ButtonId.BTN_DPAD_UP),
        (" Mode ", ButtonId.BTN_MODE),
    ])
    def test_resolution(self, name, expected):
        assert button_from_name(name) == expected

    def test_unknown(self):
        with pytest.raises(KeyError):
            button_from_name("turbo")


@pytest.mark.unittest
class TestLoading:
    def test_load_json_file(self, tmp_path):
        path = tmp_path / "joystick.json"
        path.write_text(json.dumps({
            "poll_ms": 2,
            "pads": [
                {"instance": 0},
                {"instance": 1, "name": "Player 2", "lines": [
                    {"name": "up", "button": "dpad_up", "pin": 26},
                    {"name": "a", "button": "a", "pin": 27, "active_low": False},
                    {"name": "test", "button": "thumbr", "pin": None},
                ]},
            ],
        }))

        config = load_config(path)

        assert config.poll_ms == 2
        assert len(config.pads[0].lines) == 12
        p2 = config.pads[1]
        assert p2.name == "Player 2"
        assert p2.lines[1] == LineMapping("a", ButtonId.BTN_A, active_low=False, pin=27)
        assert p2.lines[2].pin is None

    def test_defaults_when_empty(self):
        config = config_from_dict({})
        assert config.poll_ms == 1
        assert config.pads[0].instance == 0

    def test_poll_zero_becomes_one(self):
        assert config_from_dict({"poll_ms": 0}).poll_ms == 1

    @pytest.mark.parametrize("data", [
        [],
        {"poll_ms": -1},
        {"pads": [{"instance": 0, "lines": [{"name": "up"}]}]},
        {"pads": [{"instance": 0, "lines": [{"name": "up", "button": "turbo"}]}]},
        {"pads": [{"instance": 0, "lines": [{"name": "up", "button": "a", "pin": "4"}]}]},
        {"pads": [{"instance": 0, "lines": [{"name": "up", "button": "a", "active_low": "yes"}]}]},
        {"pads": [{"instance": "0"}]},
        {"pads": [{"instance": 0, "lines": []}]},
        {"pads": None},
        {"pads": {"instance": 0}},
        {"pads": [{"instance": 0, "lines": "up"}]},
        {"pads": [{"instance": 0, "lines": ["up"]}]},
        {"pads": [{"instance": 0, "lines": [{"name": 3, "button": "a"}]}]},
        {"pads": [{"instance": 0, "layout": "jumbo"}]},
    ])
    def test_malformed(self, data):
        with pytest.raises(ConfigError):
            config_from_dict(data)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(path)


@pytest.mark.unittest
class TestExtendedLayout:
    def test_adds_unwired_home_and_test_lines(self):
        pad = default_pad_config(1, extended=True)

        assert len(pad.lines) == 14
        assert [line.pin for line in pad.lines[:12]] == [9, 3, 4, 11, 17, 24, 19, 18, 14, 10, 5, 6]
        assert [(line.name, line.button, line.pin) for line in pad.lines[12:]] == [
            ("home", ButtonId.BTN_MODE, None),
            ("test", ButtonId.BTN_THUMBR, None),
        ]
        pad.validate()

    def test_selected_by_layout_key(self):
        config = config_from_dict({"pads": [{"instance": 0, "layout": "extended"}, {"instance": 1}]})
        assert [len(pad.lines) for pad in config.pads] == [14, 12]

    def test_bad_json_shape_from_file_is_config_error(self, tmp_path):
        path = tmp_path / "joystick.json"
        path.write_text(json.dumps({"pads": [{"instance": 0, "lines": ["up", "down"]}]}))
        with pytest.raises(ConfigError):
            load_config(path)
