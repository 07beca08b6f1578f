import unittest

import numpy as np

from posecheck.core import geometry
from posecheck.core.errors import DegenerateVectorError


class VectorGeometryTests(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(1234)
        self.pairs = [
            (rng.normal(size=3), rng.normal(size=3)) for _ in range(200)
        ]

    def test_subtract_dot_cross(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([4.0, 5.0, 6.0])
        np.testing.assert_allclose(geometry.subtract(a, b), [-3.0, -3.0, -3.0])
        self.assertEqual(geometry.dot(a, b), 32.0)
        np.testing.assert_allclose(geometry.cross(a, b), [-3.0, 6.0, -3.0])

    def test_normalize_unit_length(self):
        out = geometry.normalize([3.0, 0.0, 4.0])
        np.testing.assert_allclose(out, [0.6, 0.0, 0.8], rtol=0, atol=1e-12)
        self.assertAlmostEqual(geometry.length(out), 1.0, places=12)

    def test_normalize_zero_vector_raises(self):
        with self.assertRaises(DegenerateVectorError):
            geometry.normalize([0.0, 0.0, 0.0])

    def test_normalize_non_finite_raises(self):
        with self.assertRaises(DegenerateVectorError):
            geometry.normalize([np.inf, 0.0, 0.0])

    def test_rejects_wrong_dimension(self):
        with self.assertRaises(ValueError):
            geometry.subtract([1.0, 2.0], [1.0, 2.0])

    def test_angle_known_values(self):
        self.assertEqual(geometry.angle_between([1, 0, 0], [0, 1, 0]), 90.0)
        self.assertEqual(geometry.angle_between([1, 0, 0], [-1, 0, 0]), 180.0)
        self.assertEqual(geometry.angle_between([1, 0, 0], [1, 1, 0]), 45.0)
        self.assertEqual(geometry.angle_between([2, 0, 0], [5, 0, 0]), 0.0)

    def test_angle_rounded_to_two_decimals(self):
        angle = geometry.angle_between([1.0, 0.0, 0.0], [1.0, 0.3, 0.0])
        self.assertEqual(angle, round(angle, 2))
        self.assertAlmostEqual(angle, 16.70, places=2)

    def test_angle_stable_near_zero_and_straight(self):
        tiny = 1e-7
        self.assertEqual(geometry.angle_between([1.0, 0.0, 0.0], [1.0, tiny, 0.0]), 0.0)
        self.assertEqual(geometry.angle_between([1.0, 0.0, 0.0], [-1.0, tiny, 0.0]), 180.0)
        # 0.5 degrees off straight is still resolved.
        off = np.tan(np.radians(0.5))
        self.assertEqual(geometry.angle_between([1.0, 0.0, 0.0], [-1.0, off, 0.0]), 179.5)

    def test_angle_range_and_symmetry(self):
        for a, b in self.pairs:
            angle = geometry.angle_between(a, b)
            self.assertGreaterEqual(angle, 0.0)
            self.assertLessEqual(angle, 180.0)
            self.assertEqual(angle, geometry.angle_between(b, a))

    def test_angle_with_self_is_zero(self):
        for a, _ in self.pairs:
            self.assertEqual(geometry.angle_between(a, a), 0.0)

    def test_angle_with_negated_is_supplement(self):
        for a, b in self.pairs:
            self.assertAlmostEqual(
                geometry.angle_between(a, -b),
                180.0 - geometry.angle_between(a, b),
                delta=0.0100001,
            )


if __name__ == "__main__":
    unittest.main()
