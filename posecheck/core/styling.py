"""Bone and joint styling for a presentation layer.

Nothing here draws. The functions decide which bones and joints of a
skeleton are visible and which style category each one gets; the palette
maps categories to colors and widths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence

from posecheck.core.comparison import deviating_bones
from posecheck.core.constants import (
    BONES,
    FrameEdges,
    JointTrackingState,
    JointType,
    SkeletonTrackingState,
)
from posecheck.core.skeleton import Skeleton
from posecheck.models.config import StyleConfig

TRACKED = "tracked"
INFERRED = "inferred"
INCORRECT = "incorrect"


@dataclass(frozen=True)
class BoneStyle:
    color: str
    width: float


@dataclass(frozen=True)
class StylePalette:
    bones: Mapping[str, BoneStyle]
    joints: Mapping[str, str]
    center_point_color: str
    clipped_edge_color: str

    @classmethod
    def from_config(cls, cfg: StyleConfig) -> "StylePalette":
        return cls(
            bones=MappingProxyType(
                {
                    TRACKED: BoneStyle(cfg.tracked_bone.color, float(cfg.tracked_bone.width)),
                    INFERRED: BoneStyle(cfg.inferred_bone.color, float(cfg.inferred_bone.width)),
                    INCORRECT: BoneStyle(cfg.incorrect_bone.color, float(cfg.incorrect_bone.width)),
                }
            ),
            joints=MappingProxyType(
                {
                    TRACKED: cfg.tracked_joint_color,
                    INFERRED: cfg.inferred_joint_color,
                }
            ),
            center_point_color=cfg.center_point_color,
            clipped_edge_color=cfg.clipped_edge_color,
        )

    def bone_style(self, category: str) -> BoneStyle:
        return self.bones[category]


@dataclass(frozen=True)
class BoneSegment:
    start: JointType
    end: JointType
    category: str


@dataclass(frozen=True)
class SkeletonPlan:
    tracking_id: int
    bones: List[BoneSegment] = field(default_factory=list)
    joints: List[tuple[JointType, str]] = field(default_factory=list)
    center_point: Optional[tuple[float, float, float]] = None
    clipped_edges: List[str] = field(default_factory=list)

    def to_dict(self, palette: StylePalette | None = None) -> dict:
        bones = []
        for bone in self.bones:
            item = {"start": bone.start.value, "end": bone.end.value, "category": bone.category}
            if palette is not None:
                style = palette.bone_style(bone.category)
                item["color"] = style.color
                item["width"] = style.width
            bones.append(item)
        joints = []
        for joint_type, category in self.joints:
            item = {"joint": joint_type.value, "category": category}
            if palette is not None:
                item["color"] = palette.joints[category]
            joints.append(item)
        return {
            "tracking_id": self.tracking_id,
            "bones": bones,
            "joints": joints,
            "center_point": list(self.center_point) if self.center_point is not None else None,
            "clipped_edges": list(self.clipped_edges),
        }


def bone_category(skeleton: Skeleton, start: JointType, end: JointType) -> Optional[str]:
    state0 = skeleton.joint(start).tracking_state
    state1 = skeleton.joint(end).tracking_state
    if JointTrackingState.NOT_TRACKED in (state0, state1):
        return None
    if state0 == JointTrackingState.INFERRED and state1 == JointTrackingState.INFERRED:
        return None
    if state0 == JointTrackingState.TRACKED and state1 == JointTrackingState.TRACKED:
        return TRACKED
    return INFERRED


def plan_bones(skeleton: Skeleton, deviations: Sequence[bool] | None = None) -> List[BoneSegment]:
    flagged = deviating_bones(deviations) if deviations is not None else set()
    out: List[BoneSegment] = []
    for start, end in BONES:
        category = bone_category(skeleton, start, end)
        if category is None:
            continue
        # Deviation only restyles bones that are visible at all.
        if frozenset((start, end)) in flagged:
            category = INCORRECT
        out.append(BoneSegment(start=start, end=end, category=category))
    return out


def plan_joints(skeleton: Skeleton) -> List[tuple[JointType, str]]:
    out: List[tuple[JointType, str]] = []
    for joint_type, joint in skeleton.joints.items():
        if joint.tracking_state == JointTrackingState.TRACKED:
            out.append((joint_type, TRACKED))
        elif joint.tracking_state == JointTrackingState.INFERRED:
            out.append((joint_type, INFERRED))
    return out


def clipped_edge_names(edges: FrameEdges) -> List[str]:
    return [
        edge.name.lower()
        for edge in (FrameEdges.BOTTOM, FrameEdges.TOP, FrameEdges.LEFT, FrameEdges.RIGHT)
        if edge in edges
    ]


def plan_skeleton(skeleton: Skeleton, deviations: Sequence[bool] | None = None) -> SkeletonPlan:
    edges = clipped_edge_names(skeleton.clipped_edges)
    if skeleton.tracking_state == SkeletonTrackingState.TRACKED:
        return SkeletonPlan(
            tracking_id=skeleton.tracking_id,
            bones=plan_bones(skeleton, deviations),
            joints=plan_joints(skeleton),
            clipped_edges=edges,
        )
    if skeleton.tracking_state == SkeletonTrackingState.POSITION_ONLY:
        return SkeletonPlan(
            tracking_id=skeleton.tracking_id,
            center_point=skeleton.position,
            clipped_edges=edges,
        )
    return SkeletonPlan(tracking_id=skeleton.tracking_id, clipped_edges=edges)
