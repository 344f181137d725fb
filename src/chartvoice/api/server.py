"""FastAPI server: POST /command plus read-only chart and history views."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from chartvoice import config
from chartvoice.chart.state import ChartState
from chartvoice.commands.executor import VoiceCommandEngine

# Configure logging on import, before anything else logs
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="chartvoice", description="Voice command engine for diagrams")

# CORS for the editor dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:5174"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# One chart per process. Sync endpoints run in a thread pool, so commands
# are serialized here; the engine itself assumes a single writer.
_engine: VoiceCommandEngine | None = None
_lock = threading.Lock()


def _get_engine() -> VoiceCommandEngine:
    global _engine
    if _engine is None:
        logger.info("Initializing chart and command engine")
        _engine = VoiceCommandEngine(ChartState())
    return _engine


def reset_engine() -> None:
    global _engine
    with _lock:
        _engine = None


class CommandRequest(BaseModel):
    transcript: str


class CommandResponse(BaseModel):
    result: str
    success: bool
    entry_id: int


class HistoryEntryResponse(BaseModel):
    id: int
    transcript: str
    result: str
    success: bool
    timestamp: str


class NodeInventoryItem(BaseModel):
    id: str
    label: str
    type: str


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/command", response_model=CommandResponse)
def command(req: CommandRequest):
    logger.info("POST /command transcript=%r", req.transcript[:120])
    t0 = time.perf_counter()
    with _lock:
        entry = _get_engine().run(req.transcript)
    logger.debug("command handled in %.3fs", time.perf_counter() - t0)
    # A failed command is still a successful request; the failure is in the body
    return CommandResponse(result=entry.result, success=entry.success, entry_id=entry.id)


@app.get("/history", response_model=list[HistoryEntryResponse])
def history():
    with _lock:
        entries = _get_engine().command_history
    return [HistoryEntryResponse(**e.to_dict()) for e in entries]


@app.get("/nodes", response_model=list[NodeInventoryItem])
def nodes():
    with _lock:
        return _get_engine().node_inventory


@app.get("/chart")
def chart() -> dict[str, Any]:
    with _lock:
        engine = _get_engine()
        return {
            **engine.chart.to_dict(),
            "can_undo": engine.chart.can_undo,
            "can_redo": engine.chart.can_redo,
            "last_result": engine.last_result,
        }


@app.post("/reset")
def reset():
    reset_engine()
    logger.info("Chart reset")
    return {"reset": True}


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
