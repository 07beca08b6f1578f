from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from posecheck.api.auth import require_http_token
from posecheck.core.angles import build_angle_vector, build_joint_angles
from posecheck.core.comparison import compare_angles, compare_skeletons
from posecheck.core.constants import JOINT_TRIPLES
from posecheck.core.errors import PoseCheckError
from posecheck.models.api import (
    CompareAnglesRequest,
    CompareRequest,
    DeviationResponse,
    FrameRequest,
    ReferenceRequest,
    SkeletonPayload,
)
from posecheck.models.config import ConfigUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _runtime(request: Request):
    return request.app.state.runtime


def _authorized_runtime(request: Request):
    runtime = _runtime(request)
    require_http_token(request, runtime.config_store.config.server.token)
    return runtime


def _bad_request(exc: PoseCheckError) -> HTTPException:
    logger.info("Rejected request: %s", exc)
    return HTTPException(status_code=400, detail=str(exc))


@router.get("/config")
def get_config(request: Request):
    runtime = _authorized_runtime(request)
    return runtime.config_store.config.maybe_masked_dump(mask_token=True)


@router.put("/config")
def put_config(request: Request, payload: ConfigUpdate):
    runtime = _authorized_runtime(request)
    cfg = runtime.config_store.update(payload)
    # Rebuild dependent services on config change.
    runtime.apply_config()
    return cfg.maybe_masked_dump(mask_token=True)


@router.get("/triples")
def triples(request: Request):
    _authorized_runtime(request)
    return [
        {
            "index": idx,
            "proximal": triple.proximal.value,
            "middle": triple.middle.value,
            "distal": triple.distal.value,
        }
        for idx, triple in enumerate(JOINT_TRIPLES)
    ]


@router.post("/angles")
def angles(request: Request, payload: SkeletonPayload):
    runtime = _authorized_runtime(request)
    digits = runtime.config_store.config.comparison.round_digits
    try:
        items = build_joint_angles(payload.to_skeleton(), digits=digits)
    except PoseCheckError as exc:
        raise _bad_request(exc) from exc
    return {
        "angles": [item.degrees for item in items],
        "joint_angles": [item.to_dict() for item in items],
    }


@router.post("/compare")
def compare(request: Request, payload: CompareRequest):
    runtime = _authorized_runtime(request)
    comparison_cfg = runtime.config_store.config.comparison
    try:
        result = compare_skeletons(
            payload.reference.to_skeleton(),
            payload.candidate.to_skeleton(),
            threshold_deg=comparison_cfg.threshold_deg,
            digits=comparison_cfg.round_digits,
        )
    except PoseCheckError as exc:
        raise _bad_request(exc) from exc
    return result.to_dict()


@router.post("/compare/angles", response_model=DeviationResponse)
def compare_angle_vectors(request: Request, payload: CompareAnglesRequest):
    runtime = _authorized_runtime(request)
    threshold = payload.threshold_deg
    if threshold is None:
        threshold = runtime.config_store.config.comparison.threshold_deg
    try:
        deviations = compare_angles(payload.reference, payload.candidate, threshold)
    except PoseCheckError as exc:
        raise _bad_request(exc) from exc
    return DeviationResponse(
        deviations=deviations,
        threshold_deg=float(threshold),
        deviating_indices=[idx for idx, flag in enumerate(deviations) if flag],
    )


@router.get("/reference")
def get_reference(request: Request):
    runtime = _authorized_runtime(request)
    doc = runtime.reference_store.load()
    status = runtime.session.status()
    return {
        "has_reference": status["has_reference"],
        "angles": status["reference_angles"],
        "stored": doc.model_dump(mode="json") if doc is not None else None,
    }


@router.put("/reference")
def put_reference(request: Request, payload: ReferenceRequest):
    runtime = _authorized_runtime(request)
    if (payload.skeleton is None) == (payload.angles is None):
        raise HTTPException(status_code=400, detail="provide exactly one of skeleton or angles")
    skeleton = None
    digits = runtime.config_store.config.comparison.round_digits
    try:
        if payload.skeleton is not None:
            skeleton = payload.skeleton.to_skeleton()
            values = build_angle_vector(skeleton, digits=digits)
        else:
            values = payload.angles
        # Persist first so the session never holds a reference the store lost.
        doc = runtime.reference_store.save(values, skeleton=skeleton)
    except PoseCheckError as exc:
        raise _bad_request(exc) from exc
    except OSError as exc:
        logger.error("Could not save reference pose to %s: %s", runtime.reference_store.path, exc)
        raise HTTPException(status_code=503, detail="reference_not_saved") from exc
    values = runtime.session.set_reference_angles(doc.angles)
    return {"has_reference": True, "angles": values}


@router.delete("/reference")
def delete_reference(request: Request):
    runtime = _authorized_runtime(request)
    runtime.session.clear_reference()
    removed = runtime.reference_store.clear()
    return {"has_reference": False, "removed": removed}


@router.post("/frames")
def frames(request: Request, payload: FrameRequest):
    runtime = _authorized_runtime(request)
    try:
        skeletons = [item.to_skeleton() for item in payload.skeletons]
    except PoseCheckError as exc:
        raise _bad_request(exc) from exc
    result = runtime.session.process_frame(skeletons, timestamp=payload.timestamp)
    out = result.to_dict()
    out["plans"] = [plan.to_dict(runtime.palette) for plan in result.plans]
    return out


@router.get("/session/status")
def session_status(request: Request):
    runtime = _authorized_runtime(request)
    return runtime.session.status()
