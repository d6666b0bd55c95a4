import logging

import pytest

from pad_utils import HybridLogger, OnceInMs, describe_gpio


@pytest.mark.unittest
class TestHybridLogger:
    def test_class_level_filtering_and_file_output(self, tmp_path):
        with HybridLogger("hybrid-test", log_dir=str(tmp_path), console=False) as hybrid:
            quiet = hybrid.get_class_logger("Quiet", logging.WARNING)
            loud = hybrid.get_class_logger("Loud", logging.DEBUG)
            quiet.info("hidden message")
            loud.debug("visible message")
            loud.flush()
            text = hybrid.log_file.read_text()

        assert "[Loud] visible message" in text
        assert "hidden message" not in text

    def test_same_class_logger_is_reused(self):
        hybrid = HybridLogger("hybrid-reuse", log_dir=None, console=False)
        assert hybrid.get_class_logger("A") is hybrid.get_class_logger("A")
        hybrid.cleanup()

    def test_error_with_exception(self, tmp_path):
        with HybridLogger("hybrid-error", log_dir=str(tmp_path), console=False) as hybrid:
            logger = hybrid.get_class_logger("Err")
            try:
                raise RuntimeError("kaput")
            except RuntimeError as e:
                logger.error("operation failed", exception=e)
            text = hybrid.log_file.read_text()

        assert "operation failed | Type: RuntimeError" in text


@pytest.mark.unittest
class TestOnceInMs:
    def test_throttles_and_counts(self):
        throttle = OnceInMs(60000)
        assert throttle.should_execute()
        assert not throttle.should_execute()
        assert not throttle.should_execute()
        assert throttle.take_suppressed() == 2
        assert throttle.take_suppressed() == 0
        throttle.reset()
        assert throttle.should_execute()


@pytest.mark.unittest
def test_describe_gpio():
    assert describe_gpio(2) == "GPIO2 (pin 3)"
    assert describe_gpio(99) == "GPIO99"
