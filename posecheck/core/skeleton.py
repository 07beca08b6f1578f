from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import numpy as np

from posecheck.core.constants import (
    FrameEdges,
    JointTrackingState,
    JointType,
    SkeletonTrackingState,
)
from posecheck.core.errors import UnknownJointIdentifierError


def resolve_joint_type(identifier) -> JointType:
    """Map a JointType, its value ("ElbowRight") or member name ("ELBOW_RIGHT")."""
    if isinstance(identifier, JointType):
        return identifier
    if isinstance(identifier, str):
        try:
            return JointType(identifier)
        except ValueError:
            pass
        try:
            return JointType[identifier]
        except KeyError:
            pass
    raise UnknownJointIdentifierError(f"unknown joint identifier: {identifier!r}")


@dataclass(frozen=True)
class Joint:
    joint_type: JointType
    position: tuple[float, float, float]
    tracking_state: JointTrackingState = JointTrackingState.TRACKED

    def __post_init__(self):
        xyz = tuple(float(v) for v in self.position)
        if len(xyz) != 3:
            raise ValueError(f"joint {self.joint_type.value} needs 3 coordinates, got {len(xyz)}")
        object.__setattr__(self, "position", xyz)
        object.__setattr__(self, "tracking_state", JointTrackingState(self.tracking_state))

    @property
    def xyz(self) -> np.ndarray:
        return np.array(self.position, dtype=float)


@dataclass(frozen=True)
class Skeleton:
    """One tracked body in one captured frame.

    Holds exactly one joint per JointType. Instances are snapshots; use
    ``with_joint`` to derive a modified copy.
    """

    joints: Mapping[JointType, Joint]
    tracking_state: SkeletonTrackingState = SkeletonTrackingState.TRACKED
    position: Optional[tuple[float, float, float]] = None
    clipped_edges: FrameEdges = FrameEdges.NONE
    tracking_id: int = 0

    def __post_init__(self):
        resolved: dict[JointType, Joint] = {}
        for key, joint in self.joints.items():
            joint_type = resolve_joint_type(key)
            if joint.joint_type != joint_type:
                raise ValueError(
                    f"joint stored under {joint_type.value} reports {joint.joint_type.value}"
                )
            resolved[joint_type] = joint
        missing = [jt.value for jt in JointType if jt not in resolved]
        if missing:
            raise UnknownJointIdentifierError(f"skeleton is missing joints: {', '.join(missing)}")
        object.__setattr__(self, "joints", MappingProxyType(resolved))
        if self.position is not None:
            object.__setattr__(self, "position", tuple(float(v) for v in self.position))

    def joint(self, identifier) -> Joint:
        return self.joints[resolve_joint_type(identifier)]

    def __getitem__(self, identifier) -> Joint:
        return self.joint(identifier)

    def with_joint(
        self,
        identifier,
        position=None,
        tracking_state: JointTrackingState | None = None,
    ) -> "Skeleton":
        joint_type = resolve_joint_type(identifier)
        current = self.joints[joint_type]
        replaced = Joint(
            joint_type=joint_type,
            position=current.position if position is None else tuple(position),
            tracking_state=current.tracking_state if tracking_state is None else tracking_state,
        )
        joints = dict(self.joints)
        joints[joint_type] = replaced
        return Skeleton(
            joints=joints,
            tracking_state=self.tracking_state,
            position=self.position,
            clipped_edges=self.clipped_edges,
            tracking_id=self.tracking_id,
        )

    @classmethod
    def from_positions(
        cls,
        positions: Mapping,
        tracking_state: SkeletonTrackingState = SkeletonTrackingState.TRACKED,
        joint_states: Mapping | None = None,
        **kwargs,
    ) -> "Skeleton":
        joint_states = {resolve_joint_type(k): v for k, v in (joint_states or {}).items()}
        joints: dict[JointType, Joint] = {}
        for key, xyz in positions.items():
            joint_type = resolve_joint_type(key)
            joints[joint_type] = Joint(
                joint_type=joint_type,
                position=tuple(xyz),
                tracking_state=JointTrackingState(
                    joint_states.get(joint_type, JointTrackingState.TRACKED)
                ),
            )
        return cls(joints=joints, tracking_state=tracking_state, **kwargs)


def first_tracked(skeletons: Iterable[Optional[Skeleton]]) -> Optional[Skeleton]:
    for skeleton in skeletons:
        if skeleton is not None and skeleton.tracking_state == SkeletonTrackingState.TRACKED:
            return skeleton
    return None
