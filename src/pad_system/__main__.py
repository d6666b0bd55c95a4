#!/usr/bin/env python3
"""
GPIO Joystick - command line runner

Polls one or two GPIO-wired pads and publishes their buttons either to
the log or, with --uinput, as virtual input devices.

    gpio-joystick --map 0 1 --poll-ms 1 --uinput
    gpio-joystick --mock --debug

Signals: SIGINT/SIGTERM stop, SIGUSR1 suspends polling, SIGUSR2 resumes.
"""

import argparse
import logging
import queue
import signal
import sys
from typing import List, Optional

from pad_utils import HybridLogger, OnceInMs

from .button_state_sink import ButtonStateSink
from .config import JoystickConfig, PadConfig, default_config, load_config, normalize_poll_ms
from .errors import JoystickError
from .gpio_line_provider import GPIOLineProvider
from .joystick_host import JoystickHost
from .mock_line_provider import MockLineProvider

STATS_INTERVAL_MS = 60000


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gpio-joystick",
        description="Poll GPIO-wired game pads and report their buttons.",
    )
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--map", type=int, nargs="+", default=None, metavar="INSTANCE",
                        help="Pad instances to enable with the built-in tables (0=P1, 1=P2)")
    parser.add_argument("--poll-ms", type=int, default=None,
                        help="Poll interval in milliseconds (default 1; 0 means 1)")
    parser.add_argument("--mock", action="store_true",
                        help="Use in-memory lines instead of RPi.GPIO")
    parser.add_argument("--blocking", action="store_true",
                        help="With --mock, sample on the deferred worker as a blocking provider would")
    parser.add_argument("--extended", action="store_true",
                        help="Use the 14-line tables (adds unwired home and test lines)")
    parser.add_argument("--uinput", action="store_true",
                        help="Publish a uinput virtual device per pad (needs evdev)")
    parser.add_argument("--log-dir", default="logs", help="Directory for the log file")
    parser.add_argument("--debug", action="store_true", help="Log releases and scheduler details")
    args = parser.parse_args(argv)
    if args.blocking and not args.mock:
        parser.error("--blocking only applies to --mock lines")
    if args.config and (args.map or args.extended):
        parser.error("--map and --extended select built-in tables; use them without --config")
    return args


def build_config(args: argparse.Namespace) -> JoystickConfig:
    if args.config:
        config = load_config(args.config)
    else:
        config = default_config(args.map or [0], extended=args.extended)
    if args.poll_ms is not None:
        config.poll_ms = normalize_poll_ms(args.poll_ms)
    config.validate()
    return config


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    level = logging.DEBUG if args.debug else logging.INFO
    
    with HybridLogger("gpio-joystick", log_dir=args.log_dir) as hybrid:
        logger = hybrid.get_main_logger(level)
        
        try:
            config = build_config(args)
        except JoystickError as e:
            logger.error(f"Invalid configuration: {e}")
            return 2
        
        def make_provider(pad_config: PadConfig):
            provider_logger = hybrid.get_class_logger("LineProvider", level)
            if args.mock:
                names = [line.name for line in pad_config.lines if line.pin is not None]
                return MockLineProvider.all_released(
                    names, may_block=args.blocking, logger=provider_logger
                )
            return GPIOLineProvider(pad_config.pins, provider_logger, pull_mode="up")
        
        def make_sink(pad_config: PadConfig):
            sink_logger = hybrid.get_class_logger("EventSink", level)
            if args.uinput:
                from .uinput_sink import UInputEventSink
                return UInputEventSink(sink_logger)
            return ButtonStateSink(sink_logger)
        
        # Signal handlers only queue work; the main thread does it
        events: "queue.Queue[str]" = queue.Queue()
        signal.signal(signal.SIGINT, lambda sig, frame: events.put("stop"))
        signal.signal(signal.SIGTERM, lambda sig, frame: events.put("stop"))
        signal.signal(signal.SIGUSR1, lambda sig, frame: events.put("suspend"))
        signal.signal(signal.SIGUSR2, lambda sig, frame: events.put("resume"))
        
        stats_log = OnceInMs(STATS_INTERVAL_MS)
        stats_log.should_execute()
        
        try:
            with JoystickHost(config, make_provider, make_sink, hybrid, level) as host:
                host.open_all()
                logger.info("Polling started; Ctrl+C to stop")
                
                while True:
                    try:
                        event = events.get(timeout=1.0)
                    except queue.Empty:
                        event = None
                    
                    if event == "stop":
                        logger.info("Received shutdown signal")
                        break
                    if event == "suspend":
                        host.suspend_all()
                    elif event == "resume":
                        host.resume_all()
                    
                    if stats_log.should_execute():
                        for stats in host.stats():
                            logger.info(f"Stats: {stats}")
                
                host.close_all()
        except JoystickError as e:
            logger.error(f"Joystick setup failed: {e}")
            return 1
        except ImportError as e:
            logger.error(f"Missing dependency: {e}")
            return 1
        
        logger.info("GPIO joystick stopped")
        return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
