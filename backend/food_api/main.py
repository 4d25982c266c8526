"""
REST API main application.
Entry point for the FastAPI REST server.

Settings are resolved once here and stored on ``app.state`` together with
the engine and session factory; nothing below the routers reads them
from module globals.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from food_shared.config.logging import get_logger, setup_logging
from food_shared.config.settings import Settings, get_settings
from food_shared.infrastructure.db import build_engine, build_session_factory
from food_api.models import Base
from food_api.routers.cart import router as cart_router
from food_api.routers.menu import admin_router as menu_admin_router
from food_api.routers.menu import router as menu_router
from food_api.routers.orders import admin_router as orders_admin_router
from food_api.routers.orders import router as orders_router
from food_api.routers.restaurants import admin_router as restaurants_admin_router
from food_api.routers.restaurants import router as restaurants_router
from food_api.routers.users import router as users_router

logger = get_logger("food_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)

    secret_errors = settings.validate_production_secrets()
    if secret_errors:
        for error in secret_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(secret_errors)}. "
                "Server will not start with insecure configuration."
            )
    elif settings.jwt_secret == "dev-secret-change-me-in-production":
        logger.warning("Running with insecure defaults (acceptable for development only)")

    logger.info("Starting REST API", port=settings.rest_api_port, env=settings.environment)

    if settings.create_schema:
        Base.metadata.create_all(bind=app.state.engine)
        logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down REST API")
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for ``settings`` (environment settings by default)."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Food Ordering REST API",
        description="Restaurants, menus, carts, checkout and order tracking",
        version="0.1.0",
        lifespan=lifespan,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get("/api/health")
    def health_check():
        """Basic health check endpoint."""
        return {
            "status": "healthy",
            "service": "food-api",
            "environment": settings.environment,
        }

    @app.get("/api/health/detailed")
    def detailed_health_check():
        """Health check that verifies database connectivity."""
        checks = {"service": "food-api", "environment": settings.environment, "dependencies": {}}
        try:
            with app.state.session_factory() as db:
                db.execute(text("SELECT 1"))
            checks["dependencies"]["database"] = {"status": "healthy"}
            checks["status"] = "healthy"
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
            checks["status"] = "degraded"
            return JSONResponse(content=checks, status_code=503)
        return checks

    # =========================================================================
    # Include Routers
    # =========================================================================

    app.include_router(users_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(orders_admin_router)
    app.include_router(restaurants_router)
    app.include_router(restaurants_admin_router)
    app.include_router(menu_router)
    app.include_router(menu_admin_router)

    return app


app = create_app()


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "food_api.main:app",
        host="0.0.0.0",
        port=get_settings().rest_api_port,
        reload=True,
    )
