"""Entry point for the gesture block builder.

Runs camera detection in the foreground and, unless ENABLE_API=0, serves the
structure state for the renderer from a background uvicorn server.
"""

import os
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

from utils.log_utils import log
from utils.settings_store import get_settings


def _ensure_python_version() -> None:
    """Raise early on interpreters MediaPipe does not ship wheels for."""
    if (ver := sys.version_info)[:2] < (3, 10):
        raise RuntimeError(f"Python 3.10+ required for MediaPipe (found {ver.major}.{ver.minor}).")


def _is_enabled(name: str, default: bool = True) -> bool:
    """Read a boolean-like environment variable (1/0/true/false)."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _load_env_files() -> None:
    """Load .env files from the working directory and the repo root."""
    module_root = Path(__file__).resolve().parent
    for path in (Path.cwd() / ".env", module_root / ".env"):
        if path.exists():
            load_dotenv(dotenv_path=str(path), override=False)


def _serve_api(app) -> threading.Thread:
    import uvicorn

    host = os.getenv("EASY_API_HOST", "127.0.0.1")
    port = int(os.getenv("EASY_API_PORT", "8000"))
    settings = get_settings()
    log_level = str(settings.get("log_level", "INFO")).upper()
    if log_level == "DEEP":
        log_level = "DEBUG"
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=log_level.lower(),
        access_log=bool(settings.get("http_access_log", False)),
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name="StateServer", daemon=True)
    thread.start()
    log("MAIN", f"State server on http://{host}:{port}")
    return thread


def bootstrap() -> None:
    """Wire up the interaction core and run detection until interrupted."""
    _load_env_files()
    _ensure_python_version()
    get_settings()

    if _is_enabled("ENABLE_API", True):
        # The API module owns the shared workflow so the renderer and camera see one structure.
        from api.server import app, workflow

        _serve_api(app)
    else:
        from gesture_module.workflow import GestureWorkflow

        workflow = GestureWorkflow(config_path=os.getenv("GESTURE_CONFIG", "config/gesture_config.json"))

    try:
        workflow.run_blocking(show_window=_is_enabled("SHOW_PREVIEW", True))
    except KeyboardInterrupt:
        log("MAIN", "Received interrupt. Shutting down...")
    finally:
        workflow.stop_session()


if __name__ == "__main__":
    bootstrap()
