"""FastAPI backend for TreeOps job pricing."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager, closing
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from treeops import __version__, config
from treeops.limiter import limiter
from treeops.routes import audit_router, rules_router, treescore_router, work_orders_router
from treeops.routes.audit import init_audit_table
from treeops.rules.registry import default_registry
from treeops.rules.ruleset import register_default_rules
from treeops.work_orders import get_work_order_store

# Configure logging
logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the SQLite database."""
    Path(config.DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    get_work_order_store(config.DB_PATH, timeout=config.DB_TIMEOUT)
    with closing(sqlite3.connect(config.DB_PATH)) as conn:
        init_audit_table(conn)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup."""
    init_db()
    register_default_rules(default_registry)
    logger.info(
        f"TreeOps backend ready: {len(default_registry)} pricing rules, database {config.DB_PATH}"
    )
    yield


app = FastAPI(
    title="TreeOps Pricing Backend",
    description="TreeScore pricing, hazard assessment and work order estimates",
    version=__version__,
    lifespan=lifespan,
)

# Rate limiting on the calculation endpoints
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS configuration
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(treescore_router)
app.include_router(work_orders_router)
app.include_router(rules_router)
app.include_router(audit_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
