import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core import db
from core.log import configure_logging
from core.server import build_server
from core.settings import Settings, get_settings
from products import router as products_router

logger = logging.getLogger(__name__)

PRODUCTS_PREFIX = "/api/products"


@asynccontextmanager
async def lifespan(app: FastAPI):
    connection: db.DatabaseConnection = app.state.db
    # Fire and forget: the listener must not wait on MongoDB.
    connect_task = asyncio.create_task(connection.connect())
    try:
        yield
    finally:
        if not connect_task.done():
            connect_task.cancel()
        await asyncio.gather(connect_task, return_exceptions=True)
        await connection.close()


def create_app(
    settings: Settings | None = None,
    connection: db.DatabaseConnection | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.db = connection or db.DatabaseConnection.from_settings(settings)

    # Any origin may call the API; the frontend is served from elsewhere.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(products_router.router, prefix=PRODUCTS_PREFIX, tags=["products"])

    @app.get("/health")
    def health(request: Request) -> dict:
        connection: db.DatabaseConnection = request.app.state.db
        return {"status": "ok", "database": connection.state.value}

    @app.get("/")
    def root() -> dict:
        return {"message": "yolo product api"}

    return app


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("api_starting database=%s port=%s", settings.database_name, settings.port)
    server = build_server(create_app(settings), host=settings.host, port=settings.port)
    server.run()


if __name__ == "__main__":
    run()
