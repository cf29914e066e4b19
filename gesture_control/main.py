#!/usr/bin/env python3
"""
Gesture controller - session replay entry point.

Replays a recorded landmark session through the classify + debounce
pipeline and logs every confirmed gesture. A session file holds one JSON
object per detector frame:

    {"t": 0, "landmarks": [[0.51, 0.62, 0.0], ... 21 points ...]}
    {"t": 33, "landmarks": null}

Usage:
    gesture-control session.jsonl
    gesture-control session.jsonl --fire-mode once
    gesture-control session.jsonl --dwell-ms 250 --log-level DEBUG
"""

import sys
import json
import argparse
import logging

from gesture_control import __version__
from gesture_control.core.events import EventBus, Events
from gesture_control.core.pipeline import GesturePipeline
from gesture_control.modules.control.debouncer import GestureDebouncer, FIRE_MODES
from gesture_control.modules.recognition.gesture_classifier import GestureClassifier
from gesture_control.modules.utils.config import Config
from gesture_control.modules.utils.logger import setup_logging, GestureLogger
from gesture_control.modules.visualization.status import LoggingStatusObserver

logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_MS = 33.0


def read_session(path: str, frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS):
    """Yield (timestamp_ms, landmarks_or_None) for each frame in a session file.

    Lines without "t" are spaced frame_interval_ms after the previous frame.
    Blank lines are ignored; undecodable lines are logged and skipped.
    """
    last_t = None
    with open(path, "r") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("%s:%d: invalid JSON, skipped (%s)", path, line_no, e)
                continue
            if not isinstance(record, dict):
                logger.warning("%s:%d: expected an object, skipped", path, line_no)
                continue

            t = record.get("t")
            if t is None:
                t = 0.0 if last_t is None else last_t + frame_interval_ms
            try:
                last_t = float(t)
            except (TypeError, ValueError):
                logger.warning("%s:%d: bad timestamp %r, skipped", path, line_no, t)
                continue
            yield last_t, record.get("landmarks")


class GestureReplay:
    """Wires config, pipeline and loggers for a replay run."""

    def __init__(self, config: Config):
        self._config = config
        self._bus = EventBus()
        self._gesture_logger = GestureLogger()

        self._debouncer = GestureDebouncer(config.debouncing)
        self._pipeline = GesturePipeline(
            classifier=GestureClassifier(),
            debouncer=self._debouncer,
            event_bus=self._bus,
        )
        self._pipeline.add_status_observer(LoggingStatusObserver())
        self._bus.subscribe(Events.GESTURE_CONFIRMED, self._on_gesture_confirmed)

        logger.info("Debouncer: dwell=%sms, fire_mode=%s",
                    self._debouncer.dwell_threshold_ms, self._debouncer.fire_mode)

    def _on_gesture_confirmed(self, **kwargs):
        label = kwargs["label"]
        timestamp = kwargs.get("timestamp")
        self._gesture_logger.log_gesture(
            label, timestamp_ms=timestamp, held_ms=self._debouncer.held_for(timestamp),
        )

    def run(self, frames) -> dict:
        for timestamp, landmarks in frames:
            self._pipeline.process(landmarks, now=timestamp)
        return self.summary()

    def summary(self) -> dict:
        state = self._pipeline.state
        return {
            "frames": state.frame_count,
            "rejected_frames": self._pipeline.rejected_count,
            "confirmed": self._gesture_logger.total_gestures,
            "by_gesture": self._gesture_logger.counts(),
        }

    def close(self):
        self._bus.unsubscribe(Events.GESTURE_CONFIRMED, self._on_gesture_confirmed)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Replay a recorded hand landmark session through the gesture debouncer"
    )
    parser.add_argument("session", help="Path to a JSON-lines landmark session")
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--dwell-ms", type=float, default=None,
        help="Override debouncing.dwell_threshold_ms"
    )
    parser.add_argument(
        "--fire-mode", choices=FIRE_MODES, default=None,
        help="Override debouncing.fire_mode"
    )
    parser.add_argument(
        "--frame-interval-ms", type=float, default=DEFAULT_FRAME_INTERVAL_MS,
        help="Spacing for frames recorded without a timestamp"
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        help="Override logging.level"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config = Config()
    config.load(config_path=args.config)

    overrides = {}
    if args.dwell_ms is not None:
        overrides.setdefault("debouncing", {})["dwell_threshold_ms"] = args.dwell_ms
    if args.fire_mode is not None:
        overrides.setdefault("debouncing", {})["fire_mode"] = args.fire_mode
    if args.log_level is not None:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if overrides:
        config.update(overrides)

    log_cfg = config.log_settings
    setup_logging(
        level=log_cfg.get("level", "INFO"),
        log_file=log_cfg.get("file"),
        max_size_mb=log_cfg.get("max_size_mb", 10),
        backup_count=log_cfg.get("backup_count", 3),
    )

    logger.info("Gesture controller %s - replaying %s",
                config.get("system.version", __version__), args.session)

    try:
        replay = GestureReplay(config)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        summary = replay.run(read_session(args.session, args.frame_interval_ms))
    except FileNotFoundError:
        logger.error("Session file not found: %s", args.session)
        return 1
    finally:
        replay.close()

    logger.info("=" * 50)
    logger.info("  Frames: %d (rejected: %d)", summary["frames"], summary["rejected_frames"])
    logger.info("  Confirmed gestures: %d", summary["confirmed"])
    for name, count in sorted(summary["by_gesture"].items()):
        logger.info("    %-8s %d", name, count)
    logger.info("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
