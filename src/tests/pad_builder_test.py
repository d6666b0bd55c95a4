import pytest

from pad_system import (
    ButtonId,
    ConfigError,
    LineMapping,
    MockLineProvider,
    NoConnectedLines,
    PadType,
    build_pad,
)


class FailingProvider(MockLineProvider):
    def resolve(self, line_name):
        if line_name == "left":
            raise OSError("line busy")
        return super().resolve(line_name)


@pytest.mark.unittest
class TestBuildPad:
    def test_all_lines_unconnected_is_refused(self, dpad_mapping, sink, logger):
        provider = MockLineProvider({})
        with pytest.raises(NoConnectedLines):
            build_pad(dpad_mapping, provider, sink, logger)

    def test_partial_connection_is_valid(self, dpad_mapping, sink, logger):
        provider = MockLineProvider({"up": True, "right": True})
        pad = build_pad(dpad_mapping, provider, sink, logger)

        assert len(pad.descriptor) == 4
        assert [line.connected for line in pad.descriptor.lines] == [True, False, False, True]
        assert pad.descriptor.connected_buttons == [ButtonId.BTN_DPAD_UP, ButtonId.BTN_DPAD_RIGHT]
        assert [line.index for line in pad.descriptor.lines] == [0, 1, 2, 3]

    def test_identity_follows_instance(self, dpad_mapping, dpad_provider, sink, logger):
        pad = build_pad(dpad_mapping, dpad_provider, sink, logger, instance=1)

        assert pad.identity.pad_type == PadType.GPIO_BPLUS
        assert pad.identity.name == "GPIO Joystick 2"
        assert pad.identity.phys == "gpio-joystick.1"
        assert pad.identity.vendor == 0x0107
        assert pad.identity.product == 2
        assert pad.identity.version == 0x0100

    def test_custom_name(self, dpad_mapping, dpad_provider, sink, logger):
        pad = build_pad(dpad_mapping, dpad_provider, sink, logger, name="Cabinet P1")
        assert pad.identity.name == "Cabinet P1"

    def test_blocking_capability_is_captured(self, dpad_mapping, sink, logger):
        provider = MockLineProvider({"up": True}, may_block=True)
        pad = build_pad(dpad_mapping, provider, sink, logger)
        assert pad.may_block is True

    def test_empty_mapping_is_config_error(self, dpad_provider, sink, logger):
        with pytest.raises(ConfigError):
            build_pad([], dpad_provider, sink, logger)

    def test_duplicate_line_name_is_config_error(self, dpad_provider, sink, logger):
        mapping = [
            LineMapping("up", ButtonId.BTN_DPAD_UP),
            LineMapping("up", ButtonId.BTN_DPAD_DOWN),
        ]
        with pytest.raises(ConfigError):
            build_pad(mapping, dpad_provider, sink, logger)

    def test_duplicate_button_is_config_error(self, dpad_provider, sink, logger):
        mapping = [
            LineMapping("up", ButtonId.BTN_A),
            LineMapping("down", ButtonId.BTN_A),
        ]
        with pytest.raises(ConfigError):
            build_pad(mapping, dpad_provider, sink, logger)

    def test_resolve_failure_releases_claimed_lines(self, dpad_mapping, sink, logger):
        provider = FailingProvider.all_released(["up", "down", "left", "right"])
        with pytest.raises(OSError):
            build_pad(dpad_mapping, provider, sink, logger)
        assert provider.released == {"up", "down"}

    def test_release_resources_is_idempotent(self, dpad_mapping, dpad_provider, sink, logger):
        pad = build_pad(dpad_mapping, dpad_provider, sink, logger)
        pad.release_resources()
        pad.release_resources()

        assert pad.released
        assert dpad_provider.released == {"up", "down", "left", "right"}
