"""
Poker Ledger FastAPI Application Entry Point.

Configures logging and CORS, and registers the health and settlement
routes. The service is stateless: every request carries the balances
it settles.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokerledger.config import settings
from pokerledger.routes.health import router as health_router
from pokerledger.routes.settlements import router as settlements_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("pokerledger.app")

# Initialize FastAPI application
app = FastAPI(
    title="Poker Ledger API",
    description="Session ledgers and minimal-payment settlements for poker leagues",
    version=settings.APP_VERSION,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Register routers
app.include_router(health_router)  # Health endpoint at root level
app.include_router(health_router, prefix="/api")
app.include_router(settlements_router, prefix="/api")

logger.info("Poker Ledger v%s initialized", settings.APP_VERSION)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pokerledger.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
