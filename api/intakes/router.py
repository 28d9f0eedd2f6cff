"""
FastAPI router for IntakeQ proxy endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from . import service

router = APIRouter()


@router.get("/api/intakes/{intake_id}")
async def get_intake(intake_id: str, request: Request) -> JSONResponse:
    """
    Intake form data for claim auto-population.
    """
    status_code, body = await service.lookup(request, intake_id, service.INTAKE_LOOKUP)
    return JSONResponse(status_code=status_code, content=body)


@router.get("/api/clients/{client_id}")
async def get_client(client_id: str, request: Request) -> JSONResponse:
    status_code, body = await service.lookup(request, client_id, service.CLIENT_LOOKUP)
    return JSONResponse(status_code=status_code, content=body)
