"""Dashboard endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rentflow.core.dependencies import get_db_session
from rentflow.schemas.dashboard import DashboardStatsResponse
from rentflow.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
def dashboard_stats(db: Session = Depends(get_db_session)) -> DashboardStatsResponse:
    return DashboardStatsResponse(**asdict(DashboardService(db).get_stats()))
