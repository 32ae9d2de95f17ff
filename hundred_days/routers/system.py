"""Liveness and CORS diagnostic endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api", tags=["system"])


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@router.get("/health", summary="Health check", response_model=dict)
async def health_check() -> dict:
    return {"status": "OK", "message": "Server is running", "timestamp": _now_iso()}


@router.get("/test-cors", summary="CORS diagnostic", response_model=dict)
async def test_cors(request: Request) -> dict:
    """Echo the caller's Origin so a browser client can confirm CORS works."""
    return {
        "message": "CORS is working!",
        "origin": request.headers.get("origin"),
        "timestamp": _now_iso(),
    }
