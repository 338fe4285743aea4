# tripchat/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tripchat.config import settings
from tripchat.core.db import register_db
from tripchat.core.pubsub import Broadcaster
from tripchat.api.routers import auth, groups
from tripchat.api.routers.ws_groups import router as ws_groups_router
from tripchat.services.credentials import CredentialStore
from tripchat.services.groups import GroupStore

logger = logging.getLogger("uvicorn.error")

def create_app() -> FastAPI:
    """
    Build the FastAPI application.

    The stores and the broadcaster are created here and hung on app.state;
    routes reach them through the dependencies in tripchat.api.deps.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
        async with register_db(app):
            logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)
            yield
            app.state.broadcaster.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.state.credentials = CredentialStore()
    app.state.groups = GroupStore()
    app.state.broadcaster = Broadcaster()

    # CORS for the browser client (REST only; WebSockets are not subject to CORS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": {"code": "BAD_REQUEST", "message": "Invalid request body",
                                "errors": jsonable_encoder(exc.errors())}},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": {"code": "SERVER_ERROR", "message": "Internal server error"}},
        )

    # REST
    app.include_router(auth.router, prefix="/api")
    app.include_router(groups.router, prefix="/api")

    # WebSocket
    app.include_router(ws_groups_router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app

app = create_app()
