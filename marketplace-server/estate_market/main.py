import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from estate_market import __version__
from estate_market.core.config import Settings, get_settings
from estate_market.infrastructure.database import init_db
from estate_market.infrastructure.database.session import dispose_engine
from estate_market.interfaces.http.routers import create_api_router


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.logging.level.upper(), format=settings.logging.format)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await dispose_engine()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.project_name,
        description="Property marketplace with wallet settlement",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
