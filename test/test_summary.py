import os
import tempfile
import unittest

from common.types import NavigationSnapshot, Position
from dualnav.path import Trajectory
from dualnav.plot import plot_paths
from dualnav.summary import accuracy_percent, format_session_summary


def _path(*points):
    t = Trajectory()
    for i, p in enumerate(points):
        t.add_position(p, i)
    return t.view()


class TestSessionSummary(unittest.TestCase):
    def test_accuracy_formula(self):
        self.assertAlmostEqual(accuracy_percent(0.5, 2.0), 75.0)
        self.assertAlmostEqual(accuracy_percent(0.0, 0.0), 100.0)
        # distance floor of 0.1 m
        self.assertAlmostEqual(accuracy_percent(0.05, 0.0), 50.0)

    def test_summary_lines(self):
        state = NavigationSnapshot(
            dr_path=_path(Position(), Position(1, 0, 0), Position(2, 0, 0)),
            slam_path=_path(Position(), Position(1.5, 0, 0)),
            dr_distance=2.0,
            slam_distance=1.5,
            drift_error=0.5,
            step_count=3,
        )
        text = format_session_summary(state)
        lines = text.splitlines()
        self.assertEqual(lines[2], "Dead Reckoning:")
        self.assertIn("  - Distance: 2.00 m", lines)
        self.assertIn("  - Steps: 3", lines)
        self.assertIn("  - Points: 3", lines)
        self.assertIn("  - Distance: 1.50 m", lines)
        self.assertIn("  - Points: 2", lines)
        self.assertIn("  - Drift Error: 0.50 m", lines)
        self.assertIn("  - Accuracy: 75.0%", lines)

    def test_plot_paths_writes_file(self):
        state = NavigationSnapshot(
            dr_path=_path(Position(), Position(0.65, 0, 0)),
            slam_path=_path(Position(), Position(0.6, 0, 0.1)),
            obstacle_points=(Position(1, 0, 1),),
        )
        with tempfile.TemporaryDirectory() as tmp:
            out = os.path.join(tmp, "paths.png")
            plot_paths(state, out)
            self.assertGreater(os.path.getsize(out), 0)


if __name__ == '__main__':
    unittest.main()
