from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from goalgraph.adapters.diagram import build_snapshot
from goalgraph.messages import SyntaxMessage, report_messages
from goalgraph.schema import GraphSnapshot, MalformedGraph, ValidationReport
from goalgraph.validate import load_config, validate

logger = logging.getLogger("goalgraph.api")

app = FastAPI(title="goalgraph", version="0.1.0")

# CORS so the model editor page can hit it
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)


class ValidateReply(BaseModel):
    ok: bool
    report: ValidationReport
    messages: List[SyntaxMessage]


def _snapshot_from(payload: Dict[str, Any]) -> GraphSnapshot:
    if "snapshot" in payload:
        payload = payload["snapshot"]
    if "links" in payload or "elements" in payload:
        return build_snapshot(payload.get("elements") or [], payload.get("links") or [])
    return GraphSnapshot(**payload)


@app.get("/health")
def health():
    return {"ok": True, "ts": int(time.time())}


@app.post("/validate", response_model=ValidateReply)
async def post_validate(request: Request) -> ValidateReply:
    """
    Accept a snapshot {"nodes", "edges"}, {"snapshot": {...}} or a diagram
    export {"elements", "links"}. Run both checkers and return the report.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"bad json: {e}")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="bad model: expected a JSON object")

    try:
        snapshot = _snapshot_from(payload)
        report = validate(snapshot, cfg=load_config(digest=True))
    except MalformedGraph as e:
        logger.warning(f"Rejected malformed graph: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e
    except (ValidationError, TypeError) as e:
        logger.warning(f"Rejected model payload: {e}")
        raise HTTPException(status_code=400, detail=f"bad model: {e}")

    return ValidateReply(ok=report.ok, report=report, messages=report_messages(report, snapshot))


def log_level() -> int:
    """Level named by GOALGRAPH_LOG_LEVEL; unknown names fall back to INFO."""
    level = logging.getLevelName(os.getenv("GOALGRAPH_LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def main() -> None:
    import uvicorn
    logging.basicConfig(level=log_level())
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")
    uvicorn.run("goalgraph.adapters.fastapi_app:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
