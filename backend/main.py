"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import accounts, categories, investments, merchants, plaid, sync, table_preferences, transactions, webhooks
from config import settings
from database import run_migrations
from logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Bring the database schema up to date before serving requests."""
    run_migrations()
    logger.info("Database migrations applied")
    yield


app = FastAPI(
    title="Finance Tagger",
    description="Bank transaction sync, categorization and tagging",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(accounts.router)
app.include_router(categories.router)
app.include_router(categories.tags_router)
app.include_router(investments.router)
app.include_router(merchants.router)
app.include_router(plaid.router)
app.include_router(sync.router)
app.include_router(table_preferences.router)
app.include_router(transactions.router)
app.include_router(webhooks.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
