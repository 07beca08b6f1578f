import unittest

import numpy as np

from _helpers import REFERENCE_ANGLES, bent_right_elbow_skeleton, reference_skeleton
from posecheck.core.angles import build_angle_vector, build_joint_angles, joint_angle
from posecheck.core.constants import JOINT_TRIPLES, JointType
from posecheck.core.errors import DegenerateVectorError, UnknownJointIdentifierError


class JointAngleTests(unittest.TestCase):
    def test_right_elbow_right_angle(self):
        skeleton = reference_skeleton()
        angle = joint_angle(
            skeleton, JointType.SHOULDER_RIGHT, JointType.ELBOW_RIGHT, JointType.WRIST_RIGHT
        )
        self.assertEqual(angle, 90.0)

    def test_each_joint_looked_up_independently(self):
        skeleton = reference_skeleton()
        self.assertEqual(
            joint_angle(skeleton, "HipRight", "KneeRight", "AnkleRight"), 180.0
        )
        self.assertEqual(
            joint_angle(skeleton, "Head", "ShoulderCenter", "ShoulderLeft"), 90.0
        )

    def test_argument_order_of_endpoints_does_not_matter(self):
        skeleton = bent_right_elbow_skeleton()
        forward = joint_angle(skeleton, "ShoulderRight", "ElbowRight", "WristRight")
        backward = joint_angle(skeleton, "WristRight", "ElbowRight", "ShoulderRight")
        self.assertEqual(forward, backward)

    def test_coincident_joints_raise(self):
        skeleton = reference_skeleton().with_joint(
            JointType.ELBOW_RIGHT, position=(0.2, 0.5, 0.0)
        )
        with self.assertRaises(DegenerateVectorError):
            joint_angle(
                skeleton, JointType.SHOULDER_RIGHT, JointType.ELBOW_RIGHT, JointType.WRIST_RIGHT
            )

    def test_unknown_joint_raises(self):
        with self.assertRaises(UnknownJointIdentifierError):
            joint_angle(reference_skeleton(), "Head", "Neck", "ShoulderLeft")

    def test_inferred_joints_still_measured(self):
        skeleton = reference_skeleton().with_joint(
            JointType.WRIST_LEFT, tracking_state="Inferred"
        )
        self.assertEqual(joint_angle(skeleton, "ShoulderLeft", "ElbowLeft", "WristLeft"), 90.0)


class AngleVectorTests(unittest.TestCase):
    def test_reference_pose_angles(self):
        self.assertEqual(build_angle_vector(reference_skeleton()), REFERENCE_ANGLES)

    def test_vector_length_and_rounding(self):
        rng = np.random.default_rng(7)
        base = reference_skeleton()
        for _ in range(20):
            skeleton = base
            for joint_type in JointType:
                jitter = rng.normal(scale=0.03, size=3)
                position = np.array(base.joint(joint_type).position) + jitter
                skeleton = skeleton.with_joint(joint_type, position=position)
            angles = build_angle_vector(skeleton)
            self.assertEqual(len(angles), 12)
            for value in angles:
                self.assertEqual(value, round(value, 2))
                self.assertGreaterEqual(value, 0.0)
                self.assertLessEqual(value, 180.0)

    def test_tagged_angles_follow_triple_table(self):
        tagged = build_joint_angles(bent_right_elbow_skeleton())
        self.assertEqual([item.index for item in tagged], list(range(12)))
        self.assertEqual([item.triple for item in tagged], list(JOINT_TRIPLES))
        self.assertEqual(
            [item.degrees for item in tagged],
            build_angle_vector(bent_right_elbow_skeleton()),
        )

    def test_bent_elbow_only_changes_elbow_angle(self):
        angles = build_angle_vector(bent_right_elbow_skeleton(130.0))
        self.assertAlmostEqual(angles[2], 130.0, delta=0.01)
        for idx, (got, expected) in enumerate(zip(angles, REFERENCE_ANGLES)):
            if idx != 2:
                self.assertEqual(got, expected, msg=f"triple {idx}")

    def test_custom_rounding_digits(self):
        angles = build_angle_vector(bent_right_elbow_skeleton(123.456), digits=0)
        self.assertEqual(angles[2], 123.0)

    def test_to_dict_uses_joint_names(self):
        item = build_joint_angles(reference_skeleton())[2]
        self.assertEqual(
            item.to_dict(),
            {
                "index": 2,
                "proximal": "ShoulderRight",
                "middle": "ElbowRight",
                "distal": "WristRight",
                "degrees": 90.0,
            },
        )


if __name__ == "__main__":
    unittest.main()
