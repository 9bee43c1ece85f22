"""
HTTP surface for the oracle.

Endpoints:
    GET /api/oracle?ticker=FET    Full prediction payload
    GET /api/sectors              Sector heatmap
    GET /api/health               Liveness
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from oracle.core.errors import OracleError
from oracle.pipeline import OracleService
from oracle.sectors import SectorService

logger = logging.getLogger(__name__)

SECTORS_FAILURE = "Failed to fetch sector data"


def create_app(service: OracleService | None = None) -> FastAPI:
    """
    Build the FastAPI application around one ``OracleService``.

    The service's HTTP clients are closed on application shutdown.
    """
    oracle = service or OracleService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await oracle.close()

    app = FastAPI(title="Token Oracle", lifespan=lifespan)
    app.state.service = oracle
    app.state.sectors = SectorService(oracle)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(OracleError)
    async def oracle_error_handler(request: Request, exc: OracleError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/api/oracle")
    async def oracle_prediction(request: Request, ticker: str | None = None):
        """Prediction payload for a ticker or contract address."""
        report = await request.app.state.service.predict(ticker)
        return report.to_dict()

    @app.get("/api/sectors")
    async def sectors(request: Request):
        """Aggregated heatmap across the AI, RWA and MEME baskets."""
        try:
            overview = await request.app.state.sectors.overview()
        except Exception:
            logger.exception("Sector heatmap failed")
            return JSONResponse(status_code=500, content={"error": SECTORS_FAILURE})
        return overview.to_dict()

    @app.get("/api/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app
