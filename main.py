import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config_settings import configure_logging, get_cors_config, get_settings
from galaxy_client import GalaxyClient
from galaxy_service import GalaxyService
import galaxy_routes

logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    client = GalaxyClient(settings)
    app.state.galaxy_service = GalaxyService(client, settings)
    logger.info("Galaxy AMRFinder relay started")
    logger.info("Galaxy URL: %s", settings.GALAXY_URL)
    logger.info("API key: %s", settings.masked_api_key)
    try:
        yield
    finally:
        await client.aclose()
        logger.info("Galaxy AMRFinder relay stopped")


# App
app = FastAPI(title="Galaxy AMRFinder Relay", lifespan=lifespan)

# CORS
app.add_middleware(CORSMiddleware, **get_cors_config())

# Routers
app.include_router(galaxy_routes.router)


@app.get("/health")
def health():
    settings = get_settings()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "galaxy_url": settings.GALAXY_URL,
        "port": settings.PORT,
    }


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"success": False, "error": "Not found", "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.warning("Invalid request on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"success": False, "error": message or "Invalid request"})


@app.exception_handler(Exception)
async def server_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "message": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=get_settings().PORT)
