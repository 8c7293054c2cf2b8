from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wumpus_api.api.routes import router
from wumpus_api.config import get_settings
from wumpus_api.errors import GateError
from wumpus_api.startup import init_registry_for_app

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_registry_for_app(settings)
    logger.info("Registry ready (%d caves, %d tunnels per game)", settings.num_caves, settings.num_tunnels)
    yield


app = FastAPI(title="wumpus-api", version="0.1.0", lifespan=lifespan)
app.include_router(router)


@app.exception_handler(GateError)
async def _gate_error_handler(request: Request, exc: GateError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content={"status": exc.reply_status, "message": exc.message})


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "wumpus-api", "version": "0.1.0"}
