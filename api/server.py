"""FastAPI server exposing structure state to the renderer and session control."""

from __future__ import annotations

import os
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from gesture_module.workflow import GestureWorkflow
from utils.log_utils import log

CONFIG_PATH = os.getenv("GESTURE_CONFIG", "config/gesture_config.json")

workflow = GestureWorkflow(config_path=CONFIG_PATH)

app = FastAPI(title="Gesture Blocks API", version="0.1.0")

# Allow local dev origins (Vite, three.js viewer, etc.)
_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartSessionRequest(BaseModel):
    show_window: bool = False


class ConfigUpdateRequest(BaseModel):
    interaction: dict[str, Any] = Field(default_factory=dict)
    persist: bool = False


@app.get("/structure")
def structure():
    return workflow.controller.snapshot()["structure"]


@app.get("/hands")
def hands():
    return {"items": workflow.controller.snapshot()["hands"]}


@app.get("/snapshot")
def snapshot():
    return workflow.controller.snapshot()


@app.get("/events")
def events(limit: int = 50):
    return {"items": workflow.controller.recent_events(limit=max(0, min(limit, 200)))}


@app.post("/session/start")
def start_session(req: Optional[StartSessionRequest] = None):
    req = req or StartSessionRequest()
    try:
        workflow.start_session(show_window=req.show_window)
    except RuntimeError as exc:
        # Camera unavailable and similar setup errors go back to the UI as 400.
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "ok"}


@app.post("/session/stop")
def stop_session():
    try:
        workflow.stop_session()
    except Exception as exc:
        log("API", f"Failed to stop session: {exc}", "ERROR")
    return {"status": "ok"}


@app.post("/structure/reset")
def reset_structure():
    workflow.reset_structure()
    return {"status": "ok"}


@app.get("/config")
def get_config():
    return workflow.config.to_dict()


@app.post("/config")
def update_config(req: ConfigUpdateRequest):
    try:
        config = workflow.update_interaction(req.interaction, persist=req.persist)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return config.to_dict()


@app.get("/status")
def status():
    snap = workflow.controller.snapshot()
    return {
        "session_running": workflow.is_running(),
        "tick": snap["tick"],
        "blocks": len(snap["structure"]["blocks"]),
        "hands": len(snap["hands"]),
    }


@app.get("/", response_class=HTMLResponse)
def root():
    return "<html><body><h1>Gesture Blocks API</h1><p>Status: OK</p></body></html>"


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.server:app", host="127.0.0.1", port=8000, reload=True)
