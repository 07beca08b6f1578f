from __future__ import annotations

from dataclasses import dataclass
from typing import List

from posecheck.core import geometry
from posecheck.core.constants import ANGLE_ROUND_DIGITS, JOINT_TRIPLES, JointTriple
from posecheck.core.skeleton import Skeleton


@dataclass(frozen=True)
class JointAngle:
    index: int
    triple: JointTriple
    degrees: float

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "proximal": self.triple.proximal.value,
            "middle": self.triple.middle.value,
            "distal": self.triple.distal.value,
            "degrees": self.degrees,
        }


def joint_angle(
    skeleton: Skeleton,
    proximal,
    middle,
    distal,
    digits: int = ANGLE_ROUND_DIGITS,
) -> float:
    """Angle in degrees at ``middle`` between the bones to ``proximal`` and ``distal``.

    Tracking confidence is ignored here. Raises DegenerateVectorError when
    the middle joint coincides with either endpoint.
    """
    p_proximal = skeleton.joint(proximal).xyz
    p_middle = skeleton.joint(middle).xyz
    p_distal = skeleton.joint(distal).xyz

    to_proximal = geometry.normalize(geometry.subtract(p_proximal, p_middle))
    to_distal = geometry.normalize(geometry.subtract(p_distal, p_middle))
    return geometry.angle_between(to_proximal, to_distal, digits=digits)


def build_joint_angles(skeleton: Skeleton, digits: int = ANGLE_ROUND_DIGITS) -> List[JointAngle]:
    return [
        JointAngle(
            index=idx,
            triple=triple,
            degrees=joint_angle(skeleton, *triple, digits=digits),
        )
        for idx, triple in enumerate(JOINT_TRIPLES)
    ]


def build_angle_vector(skeleton: Skeleton, digits: int = ANGLE_ROUND_DIGITS) -> List[float]:
    return [item.degrees for item in build_joint_angles(skeleton, digits=digits)]
