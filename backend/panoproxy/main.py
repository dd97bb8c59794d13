"""Main FastAPI application."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from panoproxy.api import recorders, sessions
from panoproxy.config import settings
from panoproxy.dependencies import create_panopto_client
from panoproxy.utils.exceptions import ProxyError, validation_error
from panoproxy.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the Panopto client for the lifetime of the application."""
    app.state.panopto_client = create_panopto_client()
    try:
        yield
    finally:
        logger.info("Shutting down Panopto client")
        await app.state.panopto_client.aclose()


app = FastAPI(
    title="PanoProxy",
    description="REST proxy in front of the Panopto recorder and session APIs",
    version="0.1.0",
    lifespan=lifespan,
    openapi_url="/openapi.json" if settings.environment == "development" else None,
)


@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    """Render route failures as {..., success: false, message}."""
    logger.warning(f"{request.method} {request.url.path} failed ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing parameters are a 400 in the same body shape."""
    return await proxy_error_handler(request, validation_error(exc.errors()))


# Include routers
app.include_router(recorders.router)
app.include_router(sessions.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
