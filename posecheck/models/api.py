from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from posecheck.core.constants import (
    FrameEdges,
    JointTrackingState,
    JointType,
    SkeletonTrackingState,
)
from posecheck.core.skeleton import Joint, Skeleton

_EDGE_NAMES = {edge.name.lower(): edge for edge in FrameEdges if edge is not FrameEdges.NONE}


class JointPayload(BaseModel):
    x: float
    y: float
    z: float
    tracking_state: JointTrackingState = JointTrackingState.TRACKED


class SkeletonPayload(BaseModel):
    joints: Dict[JointType, JointPayload]
    tracking_state: SkeletonTrackingState = SkeletonTrackingState.TRACKED
    position: Optional[List[float]] = None
    clipped_edges: List[str] = Field(default_factory=list)
    tracking_id: int = 0

    @field_validator("position")
    @classmethod
    def _validate_position(cls, value):
        if value is not None and len(value) != 3:
            raise ValueError("position must contain [x, y, z]")
        return value

    @field_validator("clipped_edges")
    @classmethod
    def _validate_edges(cls, value: List[str]) -> List[str]:
        unknown = [name for name in value if name.lower() not in _EDGE_NAMES]
        if unknown:
            raise ValueError(f"unknown clipped edges: {unknown}")
        return [name.lower() for name in value]

    def to_skeleton(self) -> Skeleton:
        edges = FrameEdges.NONE
        for name in self.clipped_edges:
            edges |= _EDGE_NAMES[name]
        joints = {
            joint_type: Joint(
                joint_type=joint_type,
                position=(item.x, item.y, item.z),
                tracking_state=item.tracking_state,
            )
            for joint_type, item in self.joints.items()
        }
        return Skeleton(
            joints=joints,
            tracking_state=self.tracking_state,
            position=tuple(self.position) if self.position is not None else None,
            clipped_edges=edges,
            tracking_id=self.tracking_id,
        )

    @classmethod
    def from_skeleton(cls, skeleton: Skeleton) -> "SkeletonPayload":
        return cls(
            joints={
                joint_type: JointPayload(
                    x=joint.position[0],
                    y=joint.position[1],
                    z=joint.position[2],
                    tracking_state=joint.tracking_state,
                )
                for joint_type, joint in skeleton.joints.items()
            },
            tracking_state=skeleton.tracking_state,
            position=list(skeleton.position) if skeleton.position is not None else None,
            clipped_edges=[
                name for name, edge in _EDGE_NAMES.items() if edge in skeleton.clipped_edges
            ],
            tracking_id=skeleton.tracking_id,
        )


class CompareRequest(BaseModel):
    reference: SkeletonPayload
    candidate: SkeletonPayload


class CompareAnglesRequest(BaseModel):
    reference: List[float]
    candidate: List[float]
    threshold_deg: Optional[float] = None


class FrameRequest(BaseModel):
    skeletons: List[SkeletonPayload] = Field(default_factory=list)
    timestamp: Optional[float] = None


class ReferenceRequest(BaseModel):
    skeleton: Optional[SkeletonPayload] = None
    angles: Optional[List[float]] = None


class ReferenceDocument(BaseModel):
    """On-disk reference pose."""

    version: int = 1
    angles: List[float]
    skeleton: Optional[SkeletonPayload] = None
    created_at: float = 0.0
    label: Optional[str] = None


class DeviationResponse(BaseModel):
    deviations: List[bool]
    threshold_deg: float
    deviating_indices: List[int]
