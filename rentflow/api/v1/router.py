"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from rentflow.api.v1 import dashboard, health, invoices, payments


def get_api_router(prefix: str = "/api/v1") -> APIRouter:
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(health.router)
    api_router.include_router(invoices.router)
    api_router.include_router(payments.router)
    api_router.include_router(dashboard.router)
    return api_router
