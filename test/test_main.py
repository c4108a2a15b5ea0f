import contextlib
import io
import os
import tempfile
import unittest

from dualnav.main import main, parse_args


class TestParseArgs(unittest.TestCase):
    def test_defaults_without_environment(self):
        args = parse_args([], environ={})
        self.assertEqual(args.duration, 20.0)
        self.assertIsNone(args.plot)
        self.assertEqual(args.host, "127.0.0.1")
        self.assertEqual(args.port, 8765)
        self.assertIsNone(args.seed)

    def test_environment_supplies_defaults(self):
        env = {
            "DUALNAV_DURATION": "3.5",
            "DUALNAV_PLOT": "env.png",
            "DUALNAV_PORT": "0",
            "DUALNAV_SEED": "11",
        }
        args = parse_args([], environ=env)
        self.assertEqual(args.duration, 3.5)
        self.assertEqual(args.plot, "env.png")
        self.assertEqual(args.port, 0)
        self.assertEqual(args.seed, 11)

    def test_flags_override_environment(self):
        env = {"DUALNAV_DURATION": "20", "DUALNAV_PLOT": "env.png"}
        args = parse_args(["--duration", "0.5", "--plot", "p.png", "--port", "0"], environ=env)
        self.assertEqual(args.duration, 0.5)
        self.assertEqual(args.plot, "p.png")
        self.assertEqual(args.port, 0)

    def test_negative_duration_rejected(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args(["--duration", "-1"], environ={})


class TestMain(unittest.TestCase):
    def test_short_run_prints_summary_and_writes_plot(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = os.path.join(tmp, "p.png")
            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                main(["--duration", "0.3", "--port", "0", "--plot", out, "--seed", "3"])
            self.assertIn("Dual-path Navigation Session Summary", stdout.getvalue())
            self.assertGreater(os.path.getsize(out), 0)


if __name__ == '__main__':
    unittest.main()
