"""
Tests for Session Replay
=========================
"""

import json

import pytest

from conftest import create_mock_landmarks, OPEN_PALM, PEACE_SIGN
from gesture_control import main as replay_main
from gesture_control.core.types import GestureLabel


def write_session(path, frames):
    with open(path, "w") as f:
        for record in frames:
            f.write(json.dumps(record) + "\n")
    return path


@pytest.fixture
def session(tmp_path):
    palm = create_mock_landmarks(OPEN_PALM).tolist()
    peace = create_mock_landmarks(PEACE_SIGN).tolist()
    frames = [{"t": t, "landmarks": palm} for t in (0, 100, 350, 400)]
    frames.append({"t": 430, "landmarks": None})
    frames += [{"t": t, "landmarks": peace} for t in (460, 700, 800)]
    frames.append({"t": 830, "landmarks": [[0.5, 0.5]] * 4})
    return write_session(tmp_path / "session.jsonl", frames)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep main() from replacing pytest's log handlers."""
    monkeypatch.setattr(replay_main, "setup_logging", lambda **kwargs: None)


class TestReadSession:

    def test_reads_frames(self, session):
        frames = list(replay_main.read_session(str(session)))
        assert len(frames) == 9
        assert frames[0][0] == 0.0
        assert frames[4] == (430.0, None)

    def test_missing_timestamps_use_interval(self, tmp_path):
        path = write_session(tmp_path / "s.jsonl", [{"landmarks": None}] * 3)
        times = [t for t, _ in replay_main.read_session(str(path), frame_interval_ms=40)]
        assert times == [0.0, 40.0, 80.0]

    def test_bad_lines_skipped(self, tmp_path):
        path = tmp_path / "s.jsonl"
        path.write_text('{"t": 0, "landmarks": null}\nnot json\n\n[1, 2]\n'
                        '{"t": "abc", "landmarks": null}\n{"t": [5]}\n{"t": 10}\n')
        frames = list(replay_main.read_session(str(path)))
        assert frames == [(0.0, None), (10.0, None)]


class TestReplay:

    def test_summary(self, session, fresh_config, event_bus):
        fresh_config.load()
        replay = replay_main.GestureReplay(fresh_config)
        try:
            summary = replay.run(replay_main.read_session(str(session)))
        finally:
            replay.close()

        assert summary["frames"] == 9
        assert summary["rejected_frames"] == 1
        # right at 350 and 400, left at 800
        assert summary["by_gesture"] == {"right": 2, "left": 1}
        assert summary["confirmed"] == 3

    def test_close_unsubscribes(self, fresh_config, event_bus):
        fresh_config.load()
        replay = replay_main.GestureReplay(fresh_config)
        replay.close()
        assert event_bus.listener_count == 0


class TestMain:

    def test_runs_session(self, session, fresh_config, event_bus):
        assert replay_main.main([str(session)]) == 0

    def test_fire_mode_override(self, session, fresh_config, event_bus):
        confirmed = []
        event_bus.subscribe("gesture_confirmed", lambda **kw: confirmed.append(kw["label"]))
        assert replay_main.main([str(session), "--fire-mode", "once"]) == 0
        assert confirmed == [GestureLabel.RIGHT, GestureLabel.LEFT]

    def test_dwell_override(self, session, fresh_config, event_bus):
        confirmed = []
        event_bus.subscribe("gesture_confirmed", lambda **kw: confirmed.append(kw["label"]))
        assert replay_main.main([str(session), "--dwell-ms", "1000"]) == 0
        assert confirmed == []

    def test_bad_timestamp_does_not_abort(self, tmp_path, fresh_config, event_bus):
        palm = create_mock_landmarks(OPEN_PALM).tolist()
        path = write_session(tmp_path / "s.jsonl", [
            {"t": 0, "landmarks": palm},
            {"t": "abc", "landmarks": palm},
            {"t": 350, "landmarks": palm},
        ])
        confirmed = []
        event_bus.subscribe("gesture_confirmed", lambda **kw: confirmed.append(kw["label"]))
        assert replay_main.main([str(path)]) == 0
        assert confirmed == [GestureLabel.RIGHT]

    def test_missing_session(self, tmp_path, fresh_config, event_bus):
        assert replay_main.main([str(tmp_path / "missing.jsonl")]) == 1

    def test_invalid_config(self, session, tmp_path, fresh_config, event_bus):
        bad = tmp_path / "bad.yaml"
        bad.write_text("debouncing:\n  fire_mode: sometimes\n")
        assert replay_main.main([str(session), "--config", str(bad)]) == 2

    def test_non_numeric_dwell_in_config(self, session, tmp_path, fresh_config, event_bus):
        bad = tmp_path / "bad.yaml"
        bad.write_text("debouncing:\n  dwell_threshold_ms: soon\n")
        assert replay_main.main([str(session), "--config", str(bad)]) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
