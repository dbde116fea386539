"""
Guarantee Tracker API Application Factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import get_config
from ..logging_config import get_logger
from ..seed import seed_default_currencies
from ..system import TrackerSystem, get_tracker_system, set_tracker_system
from .errors import register_error_handlers
from .projects import router as projects_router
from .banks import router as banks_router
from .currencies import router as currencies_router
from .exchange_rates import router as exchange_rates_router
from .guarantee_letters import router as guarantee_letters_router
from .credits import router as credits_router
from .letter_payments import router as letter_payments_router
from .dashboard import router as dashboard_router

logger = get_logger(__name__)


def create_app(system: Optional[TrackerSystem] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        system: Tracker system to serve; the shared instance built from
            configuration is used when omitted
    """
    config = get_config()
    if system is not None:
        set_tracker_system(system)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.seed_default_currencies:
            seed_default_currencies(get_tracker_system().currencies)
        logger.info("Guarantee tracker API started")
        yield

    app = FastAPI(
        title="Guarantee Tracker API",
        description="Bank guarantee letters, credits and commission payments",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(projects_router, prefix="/api/projects", tags=["Projects"])
    app.include_router(banks_router, prefix="/api/banks", tags=["Banks"])
    app.include_router(currencies_router, prefix="/api/currencies", tags=["Currencies"])
    app.include_router(exchange_rates_router, prefix="/api/exchange-rates", tags=["Exchange Rates"])
    app.include_router(guarantee_letters_router, prefix="/api/guarantee-letters", tags=["Guarantee Letters"])
    app.include_router(credits_router, prefix="/api/credits", tags=["Credits"])
    app.include_router(letter_payments_router, prefix="/api/letter-payments", tags=["Letter Payments"])
    app.include_router(dashboard_router, prefix="/api/dashboard-stats", tags=["Dashboard"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "guarantee_tracker_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Guarantee Tracker API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "projects": "/api/projects",
                "banks": "/api/banks",
                "currencies": "/api/currencies",
                "exchange-rates": "/api/exchange-rates",
                "guarantee-letters": "/api/guarantee-letters",
                "credits": "/api/credits",
                "letter-payments": "/api/letter-payments",
                "dashboard-stats": "/api/dashboard-stats",
            }
        }

    return app
