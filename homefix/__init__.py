# homefix/__init__.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .errors import register_exception_handlers
from .routes import routers
from .services.notifications import drain
from .services.realtime import ChangeFeed

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    feed = ChangeFeed(get_settings().backend_url)
    try:
        await feed.start()
        app.state.feed = feed
    except Exception as e:
        logger.warning(f"Change feed not available, live updates disabled: {str(e)}")
        app.state.feed = None
    yield
    await drain()
    if app.state.feed is not None:
        await app.state.feed.stop()

def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Home services booking backend",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include all routers
    for router in routers:
        app.include_router(router)

    register_exception_handlers(app)

    @app.get("/")
    def health_check():
        return {"status": "healthy", "version": app.version}

    return app
