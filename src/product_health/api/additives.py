"""Additive knowledge-base endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from product_health.api.models import RiskRequest  # noqa: TC001

if TYPE_CHECKING:
    from product_health.containers import AppContainer

router = APIRouter(prefix="/additives", tags=["additives"])


@router.get("")
async def search_additives(request: Request, query: str = "") -> dict[str, object]:
    """Return additives matching a code, name or category fragment."""
    container: AppContainer = request.app.state.container
    results = container.knowledge_base.search(query)
    return {"additives": [additive.to_dict() for additive in results]}


@router.get("/stats")
async def additive_stats(request: Request) -> dict[str, object]:
    """Return knowledge-base statistics."""
    container: AppContainer = request.app.state.container
    return container.knowledge_base.stats().to_dict()


@router.post("/risk")
async def additive_risk(payload: RiskRequest, request: Request) -> dict[str, object]:
    """Return the overall risk of a set of additives."""
    container: AppContainer = request.app.state.container
    return container.additive_assessor.assess_risk(payload.codes).to_dict()


@router.get("/{code}")
async def additive_detail(code: str, request: Request) -> dict[str, object]:
    """Return a single additive entry."""
    container: AppContainer = request.app.state.container
    additive = container.knowledge_base.get(code)
    if additive is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Additive {code.strip().upper()} not found",
        )
    return additive.to_dict()
