from __future__ import annotations

from enum import Enum, Flag
from typing import NamedTuple


class JointType(str, Enum):
    HIP_CENTER = "HipCenter"
    SPINE = "Spine"
    SHOULDER_CENTER = "ShoulderCenter"
    HEAD = "Head"
    SHOULDER_LEFT = "ShoulderLeft"
    ELBOW_LEFT = "ElbowLeft"
    WRIST_LEFT = "WristLeft"
    HAND_LEFT = "HandLeft"
    SHOULDER_RIGHT = "ShoulderRight"
    ELBOW_RIGHT = "ElbowRight"
    WRIST_RIGHT = "WristRight"
    HAND_RIGHT = "HandRight"
    HIP_LEFT = "HipLeft"
    KNEE_LEFT = "KneeLeft"
    ANKLE_LEFT = "AnkleLeft"
    FOOT_LEFT = "FootLeft"
    HIP_RIGHT = "HipRight"
    KNEE_RIGHT = "KneeRight"
    ANKLE_RIGHT = "AnkleRight"
    FOOT_RIGHT = "FootRight"


class JointTrackingState(str, Enum):
    NOT_TRACKED = "NotTracked"
    INFERRED = "Inferred"
    TRACKED = "Tracked"


class SkeletonTrackingState(str, Enum):
    NOT_TRACKED = "NotTracked"
    POSITION_ONLY = "PositionOnly"
    TRACKED = "Tracked"


class FrameEdges(Flag):
    NONE = 0
    RIGHT = 1
    LEFT = 2
    TOP = 4
    BOTTOM = 8


class JointTriple(NamedTuple):
    proximal: JointType
    middle: JointType
    distal: JointType


J = JointType

# Measured angles, one per triple; the angle is taken at the middle joint.
# Index order is shared by every angle and deviation vector.
JOINT_TRIPLES: tuple[JointTriple, ...] = (
    JointTriple(J.HEAD, J.SHOULDER_CENTER, J.SHOULDER_RIGHT),
    JointTriple(J.SHOULDER_CENTER, J.SHOULDER_RIGHT, J.ELBOW_RIGHT),
    JointTriple(J.SHOULDER_RIGHT, J.ELBOW_RIGHT, J.WRIST_RIGHT),
    JointTriple(J.ELBOW_RIGHT, J.WRIST_RIGHT, J.HAND_RIGHT),
    JointTriple(J.HEAD, J.SHOULDER_CENTER, J.SHOULDER_LEFT),
    JointTriple(J.SHOULDER_CENTER, J.SHOULDER_LEFT, J.ELBOW_LEFT),
    JointTriple(J.SHOULDER_LEFT, J.ELBOW_LEFT, J.WRIST_LEFT),
    JointTriple(J.ELBOW_LEFT, J.WRIST_LEFT, J.HAND_LEFT),
    JointTriple(J.HIP_CENTER, J.HIP_RIGHT, J.KNEE_RIGHT),
    JointTriple(J.HIP_RIGHT, J.KNEE_RIGHT, J.ANKLE_RIGHT),
    JointTriple(J.HIP_CENTER, J.HIP_LEFT, J.KNEE_LEFT),
    JointTriple(J.HIP_LEFT, J.KNEE_LEFT, J.ANKLE_LEFT),
)

ANGLE_COUNT = len(JOINT_TRIPLES)

# Degrees; a difference equal to the threshold is not a deviation.
ANGLE_DEVIATION_THRESHOLD_DEG = 20.0
ANGLE_ROUND_DIGITS = 2

# Drawn bones, tuple order is start -> end.
BONES: tuple[tuple[JointType, JointType], ...] = (
    # torso
    (J.HEAD, J.SHOULDER_CENTER),
    (J.SHOULDER_CENTER, J.SHOULDER_LEFT),
    (J.SHOULDER_CENTER, J.SHOULDER_RIGHT),
    (J.SHOULDER_CENTER, J.SPINE),
    (J.SPINE, J.HIP_CENTER),
    (J.HIP_CENTER, J.HIP_LEFT),
    (J.HIP_CENTER, J.HIP_RIGHT),
    # left arm
    (J.SHOULDER_LEFT, J.ELBOW_LEFT),
    (J.ELBOW_LEFT, J.WRIST_LEFT),
    (J.WRIST_LEFT, J.HAND_LEFT),
    # right arm
    (J.SHOULDER_RIGHT, J.ELBOW_RIGHT),
    (J.ELBOW_RIGHT, J.WRIST_RIGHT),
    (J.WRIST_RIGHT, J.HAND_RIGHT),
    # left leg
    (J.HIP_LEFT, J.KNEE_LEFT),
    (J.KNEE_LEFT, J.ANKLE_LEFT),
    (J.ANKLE_LEFT, J.FOOT_LEFT),
    # right leg
    (J.HIP_RIGHT, J.KNEE_RIGHT),
    (J.KNEE_RIGHT, J.ANKLE_RIGHT),
    (J.ANKLE_RIGHT, J.FOOT_RIGHT),
)

del J
