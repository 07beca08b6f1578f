import unittest

import numpy as np

from _helpers import REFERENCE_ANGLES, bent_right_elbow_skeleton, reference_skeleton
from posecheck.core.comparison import (
    compare_angles,
    compare_skeletons,
    deviating_bones,
    deviating_triples,
    joints_for_index,
    max_abs_difference,
)
from posecheck.core.constants import JOINT_TRIPLES, JointTriple, JointType
from posecheck.core.errors import LengthMismatchError, UnknownJointIdentifierError

EXPECTED_TRIPLES = [
    ("Head", "ShoulderCenter", "ShoulderRight"),
    ("ShoulderCenter", "ShoulderRight", "ElbowRight"),
    ("ShoulderRight", "ElbowRight", "WristRight"),
    ("ElbowRight", "WristRight", "HandRight"),
    ("Head", "ShoulderCenter", "ShoulderLeft"),
    ("ShoulderCenter", "ShoulderLeft", "ElbowLeft"),
    ("ShoulderLeft", "ElbowLeft", "WristLeft"),
    ("ElbowLeft", "WristLeft", "HandLeft"),
    ("HipCenter", "HipRight", "KneeRight"),
    ("HipRight", "KneeRight", "AnkleRight"),
    ("HipCenter", "HipLeft", "KneeLeft"),
    ("HipLeft", "KneeLeft", "AnkleLeft"),
]


class CompareAnglesTests(unittest.TestCase):
    def test_identical_vectors_have_no_deviation(self):
        self.assertEqual(compare_angles(REFERENCE_ANGLES, REFERENCE_ANGLES), [False] * 12)

    def test_threshold_is_strict(self):
        reference = [90.0] * 12
        candidate = list(reference)
        candidate[0] = 110.0
        candidate[1] = 70.0
        candidate[2] = 110.01
        candidate[3] = 69.99
        out = compare_angles(reference, candidate)
        self.assertEqual(out[:4], [False, False, True, True])
        self.assertEqual(out[4:], [False] * 8)

    def test_symmetric_predicate(self):
        rng = np.random.default_rng(99)
        for _ in range(100):
            x = list(np.round(rng.uniform(0.0, 180.0, size=12), 2))
            y = list(np.round(rng.uniform(0.0, 180.0, size=12), 2))
            self.assertEqual(compare_angles(x, y), compare_angles(y, x))

    def test_length_mismatch(self):
        with self.assertRaises(LengthMismatchError) as ctx:
            compare_angles([0.0] * 11, [0.0] * 13)
        self.assertEqual(ctx.exception.lengths, (11, 13))
        with self.assertRaises(LengthMismatchError):
            compare_angles([0.0] * 12, [0.0] * 11)
        with self.assertRaises(LengthMismatchError):
            compare_angles([0.0] * 13, [0.0] * 13)

    def test_custom_threshold(self):
        reference = [90.0] * 12
        candidate = [95.0] * 12
        self.assertEqual(compare_angles(reference, candidate, threshold_deg=4.0), [True] * 12)
        self.assertEqual(compare_angles(reference, candidate, threshold_deg=5.0), [False] * 12)

    def test_max_abs_difference(self):
        candidate = list(REFERENCE_ANGLES)
        candidate[5] -= 33.5
        self.assertEqual(max_abs_difference(REFERENCE_ANGLES, candidate), 33.5)


class DeviationLocatorTests(unittest.TestCase):
    def test_table_matches_expected_order(self):
        for idx, names in enumerate(EXPECTED_TRIPLES):
            triple = joints_for_index(idx)
            self.assertIsInstance(triple, JointTriple)
            self.assertEqual(tuple(j.value for j in triple), names)
            self.assertIs(triple, JOINT_TRIPLES[idx])

    def test_out_of_range_indices_raise(self):
        for bad in (12, -1, 100):
            with self.assertRaises(UnknownJointIdentifierError):
                joints_for_index(bad)

    def test_non_integer_indices_raise(self):
        for bad in (True, 2.0, "2", None):
            with self.assertRaises(UnknownJointIdentifierError):
                joints_for_index(bad)

    def test_numpy_integer_accepted(self):
        self.assertEqual(joints_for_index(np.int64(9)), JOINT_TRIPLES[9])

    def test_deviating_triples_and_bones(self):
        deviations = [False] * 12
        deviations[2] = True
        deviations[10] = True
        self.assertEqual(deviating_triples(deviations), [JOINT_TRIPLES[2], JOINT_TRIPLES[10]])
        self.assertEqual(
            deviating_bones(deviations),
            {
                frozenset((JointType.SHOULDER_RIGHT, JointType.ELBOW_RIGHT)),
                frozenset((JointType.ELBOW_RIGHT, JointType.WRIST_RIGHT)),
                frozenset((JointType.HIP_CENTER, JointType.HIP_LEFT)),
                frozenset((JointType.HIP_LEFT, JointType.KNEE_LEFT)),
            },
        )

    def test_deviating_triples_requires_full_vector(self):
        with self.assertRaises(LengthMismatchError):
            deviating_triples([True] * 3)


class CompareSkeletonsTests(unittest.TestCase):
    def test_identical_skeletons(self):
        result = compare_skeletons(reference_skeleton(), reference_skeleton())
        self.assertEqual(result.deviations, [False] * 12)
        self.assertTrue(result.matches)
        self.assertEqual(result.deviating, [])

    def test_bent_right_elbow_flags_only_elbow(self):
        result = compare_skeletons(reference_skeleton(), bent_right_elbow_skeleton(130.0))
        self.assertEqual(result.reference_angles[2], 90.0)
        self.assertAlmostEqual(result.candidate_angles[2], 130.0, delta=0.01)
        expected = [False] * 12
        expected[2] = True
        self.assertEqual(result.deviations, expected)
        self.assertFalse(result.matches)
        self.assertEqual(len(result.deviating), 1)
        self.assertEqual(
            joints_for_index(result.deviating[0].index),
            (JointType.SHOULDER_RIGHT, JointType.ELBOW_RIGHT, JointType.WRIST_RIGHT),
        )

    def test_bend_within_threshold_not_flagged(self):
        result = compare_skeletons(reference_skeleton(), bent_right_elbow_skeleton(105.0))
        self.assertTrue(result.matches)

    def test_to_dict_shape(self):
        payload = compare_skeletons(reference_skeleton(), bent_right_elbow_skeleton()).to_dict()
        self.assertEqual(payload["threshold_deg"], 20.0)
        self.assertFalse(payload["matches"])
        self.assertEqual(payload["deviating"][0]["middle"], "ElbowRight")


if __name__ == "__main__":
    unittest.main()
