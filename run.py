#!/usr/bin/env python3
import os
import sys
from pathlib import Path

import uvicorn

from posecheck.main import DEFAULT_CONFIG_PATH
from posecheck.services.config_store import ConfigStore

if __name__ == "__main__":
    config_path = os.getenv("POSECHECK_CONFIG", DEFAULT_CONFIG_PATH)
    os.environ["POSECHECK_CONFIG"] = config_path
    server = ConfigStore(Path(config_path)).config.server
    reload = "--reload" in sys.argv or os.getenv("DEBUG", "false").lower() == "true"

    uvicorn.run(
        "posecheck.main:create_app",
        factory=True,
        host=os.getenv("API_HOST", server.host),
        port=int(os.getenv("API_PORT", str(server.port))),
        reload=reload,
    )
