"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.api import auth, dashboard, labels, notifications, projects, tasks, users, websocket
from taskboard.config import get_settings
from taskboard.database import init_db
from taskboard.errors import register_exception_handlers
from taskboard.logging_utils import setup_logging
from taskboard.services.realtime import BroadcastPublisher, ConnectionRegistry

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    if settings.auto_create_tables:
        init_db()
    logger.info(f"Taskboard API starting ({settings.environment})")
    yield
    logger.info(f"Taskboard API stopping with {len(app.state.registry)} realtime connection(s)")


app = FastAPI(
    title="Taskboard API",
    description="Task and project management with realtime updates",
    version="0.1.0",
    lifespan=lifespan,
)

# Realtime fan-out: one registry per application, shared by the publisher and the socket endpoint
app.state.registry = ConnectionRegistry()
app.state.publisher = BroadcastPublisher(app.state.registry)

register_exception_handlers(app)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(dashboard.router)
app.include_router(tasks.router)
app.include_router(projects.router)
app.include_router(notifications.router)
app.include_router(labels.router)
app.include_router(websocket.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
