"""
FastAPI router for operator diagnostics.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from . import service

router = APIRouter()


# Sync on purpose: paramiko blocks, FastAPI runs this in its threadpool.
@router.get("/api/test-sftp-list")
def test_sftp_list() -> JSONResponse:
    status_code, body = service.list_directories()
    return JSONResponse(status_code=status_code, content=body)
