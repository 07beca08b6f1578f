from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from posecheck.core.angles import build_angle_vector
from posecheck.core.comparison import compare_angles, joints_for_index, max_abs_difference
from posecheck.core.constants import ANGLE_COUNT
from posecheck.core.errors import DegenerateVectorError, LengthMismatchError
from posecheck.core.events import EventBus, PoseCheckEvent, ReferenceChangedEvent
from posecheck.core.skeleton import Skeleton, first_tracked
from posecheck.core.styling import SkeletonPlan, plan_skeleton
from posecheck.models.config import AppConfig

logger = logging.getLogger(__name__)


@dataclass
class PoseCheckResult:
    timestamp: float
    skeleton_found: bool
    tracking_id: Optional[int] = None
    angles: Optional[List[float]] = None
    deviations: Optional[List[bool]] = None
    max_delta_deg: Optional[float] = None
    plans: List[SkeletonPlan] = field(default_factory=list)
    message: str = "ok"

    @property
    def has_deviation(self) -> bool:
        return bool(self.deviations) and any(self.deviations)

    def to_dict(self) -> dict:
        deviating = []
        for idx, flag in enumerate(self.deviations or []):
            if flag:
                triple = joints_for_index(idx)
                deviating.append(
                    {
                        "index": idx,
                        "proximal": triple.proximal.value,
                        "middle": triple.middle.value,
                        "distal": triple.distal.value,
                    }
                )
        return {
            "timestamp": self.timestamp,
            "skeleton_found": self.skeleton_found,
            "tracking_id": self.tracking_id,
            "angles": self.angles,
            "deviations": self.deviations,
            "deviating": deviating,
            "max_delta_deg": self.max_delta_deg,
            "message": self.message,
        }


@dataclass
class SessionState:
    reference_angles: Optional[List[float]] = None
    frames_processed: int = 0
    frames_without_skeleton: int = 0
    frames_failed: int = 0
    frames_with_deviation: int = 0
    last_result: Optional[PoseCheckResult] = None
    message: str = "idle"


class PoseCheckSession:
    """Compares each incoming frame's first tracked skeleton to a reference pose."""

    def __init__(self, cfg: AppConfig, event_bus: EventBus | None = None):
        self.cfg = cfg
        self.event_bus = event_bus or EventBus()
        self.state = SessionState()
        self._lock = threading.Lock()

    @property
    def has_reference(self) -> bool:
        return self.state.reference_angles is not None

    def set_reference(self, skeleton: Skeleton) -> List[float]:
        angles = build_angle_vector(skeleton, digits=self.cfg.comparison.round_digits)
        return self.set_reference_angles(angles)

    def set_reference_angles(self, angles: Sequence[float]) -> List[float]:
        if len(angles) != ANGLE_COUNT:
            raise LengthMismatchError(ANGLE_COUNT, (len(angles),))
        values = [float(v) for v in angles]
        with self._lock:
            self.state.reference_angles = values
        logger.info("Reference pose set: %s", values)
        self.event_bus.publish(
            "reference", ReferenceChangedEvent(has_reference=True, angles=list(values))
        )
        return values

    def clear_reference(self) -> None:
        with self._lock:
            self.state.reference_angles = None
        logger.info("Reference pose cleared")
        self.event_bus.publish("reference", ReferenceChangedEvent(has_reference=False, angles=None))

    def process_frame(
        self,
        skeletons: Iterable[Optional[Skeleton]],
        timestamp: float | None = None,
    ) -> PoseCheckResult:
        skeletons = [s for s in skeletons if s is not None]
        now = float(timestamp) if timestamp is not None else time.time()
        with self._lock:
            reference = self.state.reference_angles
        threshold = float(self.cfg.comparison.threshold_deg)
        digits = int(self.cfg.comparison.round_digits)

        skeleton = first_tracked(skeletons)
        if skeleton is None:
            plans = [plan_skeleton(s) for s in skeletons]
            result = PoseCheckResult(
                timestamp=now,
                skeleton_found=False,
                plans=plans,
                message="no_tracked_skeleton",
            )
            self._record(result)
            return result

        try:
            angles = build_angle_vector(skeleton, digits=digits)
        except DegenerateVectorError as exc:
            logger.warning("Skipping frame at %.3f: %s", now, exc)
            result = PoseCheckResult(
                timestamp=now,
                skeleton_found=True,
                tracking_id=skeleton.tracking_id,
                plans=[plan_skeleton(s) for s in skeletons],
                message=f"error: {exc}",
            )
            self._record(result, failed=True)
            return result

        deviations = None
        max_delta = None
        if reference is not None:
            deviations = compare_angles(reference, angles, threshold)
            max_delta = max_abs_difference(reference, angles)

        plans = [
            plan_skeleton(s, deviations if s is skeleton else None) for s in skeletons
        ]
        result = PoseCheckResult(
            timestamp=now,
            skeleton_found=True,
            tracking_id=skeleton.tracking_id,
            angles=angles,
            deviations=deviations,
            max_delta_deg=max_delta,
            plans=plans,
            message="compared" if deviations is not None else "no_reference",
        )
        if result.has_deviation:
            logger.debug(
                "Pose deviation at %.3f on triples %s",
                now,
                [i for i, flag in enumerate(deviations) if flag],
            )
        self._record(result)
        return result

    def _record(self, result: PoseCheckResult, failed: bool = False) -> None:
        with self._lock:
            self.state.frames_processed += 1
            if not result.skeleton_found:
                self.state.frames_without_skeleton += 1
            if failed:
                self.state.frames_failed += 1
            if result.has_deviation:
                self.state.frames_with_deviation += 1
            self.state.last_result = result
            self.state.message = result.message
        self.event_bus.publish(
            "pose_check",
            PoseCheckEvent(
                timestamp=result.timestamp,
                skeleton_found=result.skeleton_found,
                angles=result.angles,
                deviations=result.deviations,
                message=result.message,
            ),
        )

    def status(self) -> dict:
        with self._lock:
            last = self.state.last_result
            return {
                "has_reference": self.state.reference_angles is not None,
                "reference_angles": self.state.reference_angles,
                "threshold_deg": float(self.cfg.comparison.threshold_deg),
                "frames_processed": self.state.frames_processed,
                "frames_without_skeleton": self.state.frames_without_skeleton,
                "frames_failed": self.state.frames_failed,
                "frames_with_deviation": self.state.frames_with_deviation,
                "message": self.state.message,
                "last_result": last.to_dict() if last is not None else None,
            }
