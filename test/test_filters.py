import unittest

import numpy as np

from dualnav.filters import GyroBiasCalibrator, LowPassFilter, StepDetector


class TestLowPassFilter(unittest.TestCase):
    def test_exponential_smoothing_per_axis(self):
        lp = LowPassFilter(alpha=0.3)
        np.testing.assert_allclose(lp.update((10.0, 0.0, -10.0)), (3.0, 0.0, -3.0))
        np.testing.assert_allclose(lp.update((10.0, 1.0, -10.0)), (5.1, 0.3, -5.1))

    def test_converges_to_constant_input(self):
        lp = LowPassFilter(alpha=0.3)
        for _ in range(200):
            out = lp.update((1.0, 2.0, 9.81))
        np.testing.assert_allclose(out, (1.0, 2.0, 9.81), atol=1e-9)

    def test_reset_and_validation(self):
        lp = LowPassFilter(alpha=0.5)
        lp.update((2.0, 2.0, 2.0))
        lp.reset()
        self.assertEqual(lp.value, (0.0, 0.0, 0.0))
        with self.assertRaises(ValueError):
            LowPassFilter(alpha=0.0)
        with self.assertRaises(ValueError):
            lp.update((1.0, 2.0))


class TestGyroBiasCalibrator(unittest.TestCase):
    def test_bias_finalized_once_on_last_sample(self):
        cal = GyroBiasCalibrator(samples=4)
        results = [cal.add(v) for v in (0.1, 0.2, 0.3)]
        self.assertEqual(results, [False, False, False])
        self.assertFalse(cal.calibrated)
        self.assertEqual(cal.bias, 0.0)
        self.assertAlmostEqual(cal.progress, 0.75)

        self.assertTrue(cal.add(0.4))
        self.assertAlmostEqual(cal.bias, 0.25)
        self.assertFalse(cal.add(100.0))
        self.assertAlmostEqual(cal.bias, 0.25)
        self.assertEqual(cal.count, 4)

    def test_zero_samples_means_no_calibration(self):
        cal = GyroBiasCalibrator(samples=0)
        self.assertTrue(cal.calibrated)
        self.assertEqual(cal.bias, 0.0)
        self.assertEqual(cal.progress, 1.0)

    def test_reset(self):
        cal = GyroBiasCalibrator(samples=1)
        cal.add(0.5)
        cal.reset()
        self.assertFalse(cal.calibrated)
        self.assertEqual(cal.count, 0)


class TestStepDetector(unittest.TestCase):
    def setUp(self):
        self.det = StepDetector(high=10.8, low=9.5, debounce_ms=250)

    def test_one_step_per_crossing(self):
        fired = [self.det.update(m, t) for m, t in [(9.8, 0), (11.0, 20), (12.0, 40), (11.5, 60), (10.0, 80)]]
        self.assertEqual(fired, [False, True, False, False, False])
        self.assertEqual(self.det.count, 1)
        self.assertTrue(self.det.in_step)

    def test_hysteresis_requires_drop_below_low(self):
        self.det.update(11.0, 0)
        # Dips between the thresholds do not re-arm.
        self.det.update(10.0, 400)
        self.assertFalse(self.det.update(11.0, 500))
        self.det.update(9.0, 600)
        self.assertFalse(self.det.in_step)
        self.assertTrue(self.det.update(11.0, 700))
        self.assertEqual(self.det.count, 2)

    def test_debounce_rejects_close_crossings(self):
        self.assertTrue(self.det.update(11.0, 0))
        self.det.update(9.0, 50)
        self.assertFalse(self.det.update(11.0, 100))
        # Still latched from the rejected crossing even once the window has passed.
        self.assertFalse(self.det.update(11.0, 300))
        self.det.update(9.0, 320)
        self.assertTrue(self.det.update(11.0, 340))
        self.assertEqual(self.det.count, 2)

    def test_crossing_exactly_at_debounce_counts(self):
        self.det.update(11.0, 0)
        self.det.update(9.0, 100)
        self.assertTrue(self.det.update(11.0, 250))

    def test_reset(self):
        self.det.update(11.0, 0)
        self.det.reset()
        self.assertEqual(self.det.count, 0)
        self.assertFalse(self.det.in_step)
        self.assertIsNone(self.det.last_step_ms)

    def test_invalid_thresholds(self):
        with self.assertRaises(ValueError):
            StepDetector(high=9.0, low=9.5, debounce_ms=0)


if __name__ == '__main__':
    unittest.main()
