"""Local dev entrypoint for the welfaretrack API."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    backend_dir = Path(__file__).resolve().parent
    src_dir = backend_dir / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


if __name__ == "__main__":
    _ensure_src_on_path()

    import copy

    import uvicorn
    from uvicorn.config import LOGGING_CONFIG

    log_level = os.environ.get("WELFARETRACK_LOG_LEVEL", "info").lower()

    # Route application loggers through uvicorn's default handler
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["loggers"]["welfaretrack"] = {
        "handlers": ["default"],
        "level": log_level.upper(),
        "propagate": False,
    }

    uvicorn.run(
        "welfaretrack.api.app:create_app",
        factory=True,
        host=os.environ.get("WELFARETRACK_HOST", "127.0.0.1"),
        port=int(os.environ.get("WELFARETRACK_PORT", "3000")),
        reload=os.environ.get("WELFARETRACK_ENV", "development") == "development",
        log_level=log_level,
        log_config=log_config,
    )
