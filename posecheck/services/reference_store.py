from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

from posecheck.core.constants import ANGLE_COUNT
from posecheck.core.errors import LengthMismatchError
from posecheck.core.skeleton import Skeleton
from posecheck.models.api import ReferenceDocument, SkeletonPayload
from posecheck.services.state_io import load_json, save_json_atomic

logger = logging.getLogger(__name__)


class ReferenceStore:
    """Keeps the reference pose on disk so it survives restarts."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[ReferenceDocument]:
        doc = load_json(self.path, None, ReferenceDocument.model_validate)
        if doc is None:
            return None
        if len(doc.angles) != ANGLE_COUNT:
            logger.warning(
                "Ignoring reference %s with %d angles", self.path, len(doc.angles)
            )
            return None
        return doc

    def save(
        self,
        angles: List[float],
        skeleton: Skeleton | None = None,
        label: str | None = None,
    ) -> ReferenceDocument:
        if len(angles) != ANGLE_COUNT:
            raise LengthMismatchError(ANGLE_COUNT, (len(angles),))
        doc = ReferenceDocument(
            angles=[float(v) for v in angles],
            skeleton=SkeletonPayload.from_skeleton(skeleton) if skeleton is not None else None,
            created_at=time.time(),
            label=label,
        )
        save_json_atomic(self.path, doc.model_dump(mode="json"))
        logger.info("Saved reference pose to %s", self.path)
        return doc

    def clear(self) -> bool:
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info("Removed reference pose %s", self.path)
        return True
