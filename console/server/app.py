"""
Docwarden Console - FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from docwarden.permission.factory import create_permission_engine
from docwarden.utils.logging import clear_request_context, set_request_context

from server.config import ConsoleConfig
from server.dependencies import set_console_config, set_permission_engine
from server.routers import actions, agents, evaluate, permissions


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = ConsoleConfig()
    set_console_config(config)

    engine = create_permission_engine(
        storage_type=config.storage_type,
        db_path=config.sqlite_db_path,
        seed=config.seed_defaults,
        generation_timeout=config.generation_timeout,
    )
    set_permission_engine(engine)

    yield

    await engine.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Docwarden Console",
        description="Admin console for AI agent permissions on documents",
        version="0.1.0",
        lifespan=lifespan,
    )

    config = ConsoleConfig()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        set_request_context(
            request_id=request.headers.get("x-request-id") or uuid4().hex[:12]
        )
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    app.include_router(agents.router)
    app.include_router(permissions.router)
    app.include_router(evaluate.router)
    app.include_router(actions.router)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "service": "docwarden-console"}

    return app


app = create_app()


if __name__ == "__main__":
    console_config = ConsoleConfig()
    uvicorn.run(app, host=console_config.host, port=console_config.port)
