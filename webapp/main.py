from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sales_dashboard.analytics import DEFAULT_PAGE, DEFAULT_PER_PAGE
from sales_dashboard.config import load_config
from sales_dashboard.service import TransactionQueryService, build_service
from sales_dashboard.utils import parse_int, parse_month

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> TransactionQueryService:
    return request.app.state.service


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


# Query parameters are taken as raw strings: malformed input must reach
# parse_month/parse_int instead of failing FastAPI validation with a 422.


@router.post("/initialize")
def initialize(service: TransactionQueryService = Depends(get_service)):
    try:
        return service.initialize()
    except Exception:
        logger.exception("initialize failed")
        return _error("Failed to initialize database.")


@router.get("/transactions")
def transactions(
    month: str | None = None,
    page: str | None = None,
    per_page: str | None = None,
    search: str = "",
    service: TransactionQueryService = Depends(get_service),
):
    try:
        return service.list_transactions(
            parse_month(month),
            page=parse_int(page, DEFAULT_PAGE),
            per_page=parse_int(per_page, DEFAULT_PER_PAGE),
            search=search,
        )
    except Exception:
        logger.exception("transactions query failed month=%r", month)
        return _error("Failed to fetch transactions.")


@router.get("/statistics")
def statistics(month: str | None = None, service: TransactionQueryService = Depends(get_service)):
    try:
        return service.statistics(parse_month(month))
    except Exception:
        logger.exception("statistics query failed month=%r", month)
        return _error("Failed to fetch statistics.")


@router.get("/bar-chart")
def bar_chart(month: str | None = None, service: TransactionQueryService = Depends(get_service)):
    try:
        return service.bar_chart(parse_month(month))
    except Exception:
        logger.exception("bar chart query failed month=%r", month)
        return _error("Failed to fetch bar chart data.")


@router.get("/pie-chart")
def pie_chart(month: str | None = None, service: TransactionQueryService = Depends(get_service)):
    try:
        return service.pie_chart(parse_month(month))
    except Exception:
        logger.exception("pie chart query failed month=%r", month)
        return _error("Failed to fetch pie chart data.")


@router.get("/combined")
async def combined(month: str | None = None, service: TransactionQueryService = Depends(get_service)):
    try:
        return await service.combined(parse_month(month))
    except Exception:
        logger.exception("combined query failed month=%r", month)
        return _error("Failed to fetch combined data.")


def create_app(
    service: TransactionQueryService | None = None,
    config: dict | None = None,
) -> FastAPI:
    """Build the API around ``service``, or one wired from ``config``."""
    config = config or load_config()
    service = service or build_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.service.close()

    app = FastAPI(title="Sales Dashboard API", lifespan=lifespan)
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.get("cors_origins") or []),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app
