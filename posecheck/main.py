from __future__ import annotations

import os
from pathlib import Path

from fastapi import FastAPI

from posecheck.api.rest import router as rest_router
from posecheck.api.ws import router as ws_router
from posecheck.services.runtime import build_runtime

DEFAULT_CONFIG_PATH = "configs/default.yaml"


def create_app(config_path: str | Path | None = None) -> FastAPI:
    app = FastAPI(title="Pose Check Service", version="0.1.0")
    path = config_path or os.environ.get("POSECHECK_CONFIG", DEFAULT_CONFIG_PATH)
    app.state.runtime = build_runtime(Path(path))
    app.include_router(rest_router)
    app.include_router(ws_router)
    return app
