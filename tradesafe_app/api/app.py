"""
TradeSafe dashboard HTTP and WebSocket API.

REST endpoints expose dashboard state; the ``/ws`` WebSocket receives the
current signals and portfolio on connect and every scheduled update after
that.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.defaults import AppConfig, get_default_config
from ..dashboard.service import DashboardService
from ..delivery.base import EVENT_PORTFOLIO, EVENT_SIGNALS
from ..delivery.broadcaster import EventBroadcaster
from ..delivery.scheduler import RefreshScheduler, register_dashboard_jobs
from ..delivery.websocket_delivery import WebSocketDelivery

logger = structlog.get_logger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    service: Optional[DashboardService] = None,
    start_scheduler: bool = True,
    warm_up: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration, defaults when omitted
        service: Dashboard service, built from ``config`` when omitted
        start_scheduler: Run the periodic refresh jobs while the app is up
        warm_up: Generate initial signals on start-up
    """
    config = config or get_default_config()
    service = service or DashboardService.from_config(config)

    websocket_delivery = WebSocketDelivery()
    broadcaster = EventBroadcaster()
    broadcaster.add(websocket_delivery)
    scheduler = RefreshScheduler()
    register_dashboard_jobs(scheduler, service, broadcaster, config.schedule)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if warm_up:
            count = await asyncio.to_thread(service.warm_up)
            logger.info("Initial signals generated", count=count)
        if start_scheduler:
            scheduler.start()
        try:
            yield
        finally:
            if start_scheduler:
                await scheduler.stop()

    app = FastAPI(
        title="TradeSafe Signal Dashboard",
        version=__version__,
        description="Trading signals and simulated portfolio with real-time updates",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.service = service
    app.state.broadcaster = broadcaster
    app.state.scheduler = scheduler
    app.state.websocket_delivery = websocket_delivery

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Server error", path=request.url.path, error=str(exc), exc_info=exc)
        message = "Something went wrong!" if config.is_production else str(exc)
        return JSONResponse({"error": message}, status_code=500)

    # =========================================================================
    # API ROUTES
    # =========================================================================

    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return service.health()

    @app.get("/api/signals")
    def get_signals():
        """Active (unexpired) signals, newest first."""
        try:
            return [s.to_dict() for s in service.list_active_signals()]
        except Exception as e:
            logger.error("Error fetching signals", error=str(e))
            return JSONResponse({"error": "Failed to fetch signals"}, status_code=500)

    @app.get("/api/experts")
    def get_experts():
        try:
            return [e.to_dict() for e in service.list_experts()]
        except Exception as e:
            logger.error("Error fetching experts", error=str(e))
            return JSONResponse({"error": "Failed to fetch experts"}, status_code=500)

    @app.get("/api/portfolio")
    def get_portfolio():
        try:
            return service.current_portfolio().to_dict()
        except Exception as e:
            logger.error("Error fetching portfolio", error=str(e))
            return JSONResponse({"error": "Failed to fetch portfolio data"}, status_code=500)

    @app.get("/api/quote/{symbol}")
    def get_quote(symbol: str):
        """Single quote; ``source`` tells live data from mock data."""
        try:
            result = service.get_quote(symbol)
        except Exception as e:
            logger.error("Error fetching quote", symbol=symbol, error=str(e))
            return JSONResponse({"error": "Failed to fetch quote"}, status_code=500)

        return {**result.value.to_dict(), "source": result.source.value, "reason": result.reason}

    @app.get("/api/news/{symbol}")
    def get_news(symbol: str, days: int = 7):
        try:
            return [item.to_dict() for item in service.get_company_news(symbol, days=days)]
        except Exception as e:
            logger.error("Error fetching news", symbol=symbol, error=str(e))
            return JSONResponse({"error": "Failed to fetch news"}, status_code=500)

    @app.get("/api/indicator/{symbol}")
    def get_indicator(symbol: str, indicator: str = "sma", resolution: str = "D", days: int = 30):
        try:
            data = service.get_technical_indicator(symbol, indicator, resolution=resolution, days=days)
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except Exception as e:
            logger.error("Error fetching indicator", symbol=symbol, error=str(e))
            return JSONResponse({"error": "Failed to fetch indicator"}, status_code=500)

        if data is None:
            return JSONResponse({"error": "Indicator data unavailable"}, status_code=503)
        return data

    @app.api_route("/api/generate-signals", methods=["GET", "POST"])
    def generate_signals():
        """On-demand signal generation."""
        try:
            new_signals = service.generate()
        except Exception as e:
            logger.error("Error generating signals", error=str(e))
            return JSONResponse(
                {"success": False, "error": "Failed to generate signals"},
                status_code=500
            )

        return {
            "success": True,
            "signals": [s.to_dict() for s in new_signals],
            "message": f"Generated {len(new_signals)} new signals",
        }

    @app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    def api_not_found(path: str):
        return JSONResponse({"error": "API route not found"}, status_code=404)

    # =========================================================================
    # WEBSOCKET
    # =========================================================================

    @app.websocket("/ws")
    async def websocket_updates(websocket: WebSocket):
        """Initial state on connect, then broadcasts from the scheduler."""
        await websocket_delivery.connect(websocket)

        try:
            signals = [s.to_dict() for s in service.list_active_signals()]
            await websocket_delivery.send(websocket, EVENT_SIGNALS, signals)
            await websocket_delivery.send(
                websocket, EVENT_PORTFOLIO, service.current_portfolio().to_dict()
            )

            # Client messages are ignored; receiving detects disconnects
            while True:
                await websocket.receive_text()

        except WebSocketDisconnect:
            await websocket_delivery.disconnect(websocket)
        except Exception as e:
            logger.warning("WebSocket error", error=str(e))
            await websocket_delivery.disconnect(websocket)

    return app
