"""
Tests for the replay CLI
"""

import io
import json
import logging
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from crowd_safety.cli import main, parse_args, read_frames, run_replay
from crowd_safety.config import validate_config_pydantic


def person(left, top, right, bottom):
    return {"label": "Person", "bbox": {"left": left, "top": top, "right": right, "bottom": bottom}}


FRAMES = [
    {"frameId": "f1", "timestamp": 0, "detections": []},
    {"frameId": "f2", "timestamp": 200, "detections": [person(0.25, 0.5, 0.35, 0.7)]},
    {"frameId": "f3", "timestamp": 400, "detections": [person(0.0, 0.8, 0.6, 0.9)]},
]


class TestReadFrames(unittest.TestCase):
    """Test input format detection."""

    def test_json_array(self):
        frames = list(read_frames(io.StringIO(json.dumps(FRAMES))))
        self.assertEqual([n for n, _ in frames], [1, 2, 3])

    def test_json_lines_skips_blank_and_invalid(self):
        text = json.dumps(FRAMES[0]) + "\n\n{not json}\n" + json.dumps(FRAMES[1]) + "\n"

        with self.assertLogs("crowd_safety.cli", level="ERROR"):
            frames = list(read_frames(io.StringIO(text)))

        self.assertEqual([n for n, _ in frames], [1, 4])


class TestRunReplay(unittest.TestCase):
    """Test replaying frames through an analyzer."""

    def setUp(self):
        self.config = validate_config_pydantic({})

    def replay(self, frames, **kwargs):
        source = io.StringIO("\n".join(json.dumps(f) for f in frames))
        out = io.StringIO()
        count = run_replay(source, self.config, "cam-1", out=out, **kwargs)
        return count, [json.loads(line) for line in out.getvalue().splitlines()]

    def test_one_analysis_per_frame(self):
        count, lines = self.replay(FRAMES)

        self.assertEqual(count, 3)
        self.assertEqual([line["frame_id"] for line in lines], ["f1", "f2", "f3"])
        self.assertEqual(lines[0]["overall_safety_status"], "SAFE")
        self.assertEqual(lines[1]["overall_safety_status"], "CRITICAL")
        self.assertEqual(len(lines[2]["lying_persons"]), 1)

    def test_invalid_frame_skipped(self):
        with self.assertLogs("crowd_safety.cli", level="ERROR"):
            count, lines = self.replay([{"frameId": "bad"}, FRAMES[0]])

        self.assertEqual(count, 1)
        self.assertEqual(len(lines), 1)

    def test_non_finite_timestamp_skipped(self):
        """Test Infinity and NaN timestamp lines are skipped, not fatal."""
        text = (
            '{"timestamp": Infinity, "detections": []}\n'
            '{"frameId": "n", "timestamp": NaN, "detections": []}\n'
            + json.dumps(FRAMES[0])
        )
        out = io.StringIO()

        with self.assertLogs("crowd_safety.cli", level="ERROR") as logs:
            count = run_replay(io.StringIO(text), self.config, "cam-1", out=out)

        self.assertEqual(count, 1)
        self.assertEqual(len(logs.records), 2)
        self.assertEqual(json.loads(out.getvalue())["frame_id"], "f1")

    def test_incidents_mode(self):
        _, lines = self.replay(FRAMES, incidents=True)

        types = [line["incident_type"] for line in lines]
        self.assertIn("SURGE_DETECTION", types)
        self.assertIn("LYING_PERSON", types)
        self.assertTrue(all(line["stream_id"] == "cam-1" for line in lines))

    def test_stats(self):
        _, lines = self.replay(FRAMES, stats=True)

        stats = lines[-1]
        self.assertEqual(stats["stream_id"], "cam-1")
        self.assertEqual(stats["frame_history_length"], 3)
        self.assertEqual(stats["last_analysis_timestamp"], 400)


class TestParseArgs(unittest.TestCase):
    """Test argument parsing."""

    def test_defaults(self):
        args = parse_args(["frames.jsonl"])

        self.assertEqual(args.frames, "frames.jsonl")
        self.assertIsNone(args.config)
        self.assertEqual(args.stream, "default-stream")
        self.assertFalse(args.incidents)

    def test_flags(self):
        args = parse_args(["-", "-c", "cfg.yaml", "--stream", "cam-9", "--stats", "-q"])

        self.assertEqual(args.frames, "-")
        self.assertEqual(args.config, "cfg.yaml")
        self.assertEqual(args.stream, "cam-9")
        self.assertTrue(args.stats)
        self.assertTrue(args.quiet)


class TestMain(unittest.TestCase):
    """Test the entry point's exit behavior."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = str(Path(self.temp_dir) / "config.yaml")
        Path(self.config_path).write_text(
            "analyzer:\n  density_threshold: 0.2\n", encoding="utf-8"
        )
        self.root_handlers = list(logging.root.handlers)
        self.root_level = logging.root.level
        self.env = mock.patch.dict(os.environ, {}, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()
        logging.root.handlers = self.root_handlers
        logging.root.setLevel(self.root_level)
        shutil.rmtree(self.temp_dir)

    def test_validate_prints_config(self):
        out = io.StringIO()
        with redirect_stdout(out):
            main(["--validate", "-q", "-c", self.config_path])

        self.assertIn("Configuration valid", out.getvalue())
        self.assertIn("analyzer.density_threshold: 0.2", out.getvalue())

    def test_missing_config_exits(self):
        missing = str(Path(self.temp_dir) / "nope.yaml")
        with self.assertRaises(SystemExit) as cm:
            main(["-q", "-c", missing, "frames.jsonl"])
        self.assertEqual(cm.exception.code, 1)

    def test_missing_frames_file_exits(self):
        missing = str(Path(self.temp_dir) / "frames.jsonl")
        with self.assertRaises(SystemExit) as cm:
            main(["-q", "-c", self.config_path, missing])
        self.assertEqual(cm.exception.code, 1)

    def test_no_frames_argument_exits(self):
        with self.assertRaises(SystemExit) as cm:
            main(["-q", "-c", self.config_path])
        self.assertEqual(cm.exception.code, 1)

    def test_replays_frames_file(self):
        frames_path = Path(self.temp_dir) / "frames.json"
        frames_path.write_text(json.dumps(FRAMES), encoding="utf-8")
        out = io.StringIO()

        with redirect_stdout(out):
            main(["-q", "-c", self.config_path, str(frames_path)])

        self.assertEqual(len(out.getvalue().splitlines()), 3)


if __name__ == "__main__":
    unittest.main()
