from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import List, Sequence

from posecheck.core.angles import JointAngle, build_joint_angles
from posecheck.core.constants import (
    ANGLE_COUNT,
    ANGLE_DEVIATION_THRESHOLD_DEG,
    ANGLE_ROUND_DIGITS,
    JOINT_TRIPLES,
    JointTriple,
    JointType,
)
from posecheck.core.errors import LengthMismatchError, UnknownJointIdentifierError
from posecheck.core.skeleton import Skeleton


@dataclass(frozen=True)
class PoseComparison:
    reference_angles: List[float]
    candidate_angles: List[float]
    deviations: List[bool]
    threshold_deg: float

    @property
    def deviating(self) -> List[JointAngle]:
        return [
            JointAngle(index=idx, triple=JOINT_TRIPLES[idx], degrees=self.candidate_angles[idx])
            for idx, flag in enumerate(self.deviations)
            if flag
        ]

    @property
    def matches(self) -> bool:
        return not any(self.deviations)

    def to_dict(self) -> dict:
        return {
            "reference_angles": list(self.reference_angles),
            "candidate_angles": list(self.candidate_angles),
            "deviations": list(self.deviations),
            "threshold_deg": self.threshold_deg,
            "matches": self.matches,
            "deviating": [item.to_dict() for item in self.deviating],
        }


def _check_length(*vectors: Sequence[float]) -> None:
    lengths = tuple(len(v) for v in vectors)
    if any(n != ANGLE_COUNT for n in lengths):
        raise LengthMismatchError(ANGLE_COUNT, lengths)


def compare_angles(
    reference: Sequence[float],
    candidate: Sequence[float],
    threshold_deg: float = ANGLE_DEVIATION_THRESHOLD_DEG,
) -> List[bool]:
    _check_length(reference, candidate)
    # NaN differences compare False and are never flagged.
    return [
        abs(float(ref) - float(cand)) > threshold_deg
        for ref, cand in zip(reference, candidate)
    ]


def compare_skeletons(
    reference: Skeleton,
    candidate: Skeleton,
    threshold_deg: float = ANGLE_DEVIATION_THRESHOLD_DEG,
    digits: int = ANGLE_ROUND_DIGITS,
) -> PoseComparison:
    ref_angles = [item.degrees for item in build_joint_angles(reference, digits=digits)]
    cand_angles = [item.degrees for item in build_joint_angles(candidate, digits=digits)]
    return PoseComparison(
        reference_angles=ref_angles,
        candidate_angles=cand_angles,
        deviations=compare_angles(ref_angles, cand_angles, threshold_deg),
        threshold_deg=float(threshold_deg),
    )


def joints_for_index(index: int) -> JointTriple:
    if isinstance(index, bool):
        raise UnknownJointIdentifierError(f"triple index must be an int, got {index!r}")
    try:
        index = operator.index(index)
    except TypeError:
        raise UnknownJointIdentifierError(f"triple index must be an int, got {index!r}") from None
    if not 0 <= index < ANGLE_COUNT:
        raise UnknownJointIdentifierError(
            f"triple index {index} outside 0..{ANGLE_COUNT - 1}"
        )
    return JOINT_TRIPLES[index]


def deviating_triples(deviations: Sequence[bool]) -> List[JointTriple]:
    _check_length(deviations)
    return [joints_for_index(idx) for idx, flag in enumerate(deviations) if flag]


def deviating_bones(deviations: Sequence[bool]) -> set[frozenset[JointType]]:
    """Bone segments to highlight, unordered so they match either drawing direction."""
    bones: set[frozenset[JointType]] = set()
    for triple in deviating_triples(deviations):
        bones.add(frozenset((triple.proximal, triple.middle)))
        bones.add(frozenset((triple.middle, triple.distal)))
    return bones


def max_abs_difference(reference: Sequence[float], candidate: Sequence[float]) -> float:
    _check_length(reference, candidate)
    diffs = [abs(float(a) - float(b)) for a, b in zip(reference, candidate)]
    finite = [d for d in diffs if math.isfinite(d)]
    return max(finite) if finite else 0.0
