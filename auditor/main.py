"""Entry point for the Auditor service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from auditor.config import AUDITOR_HOST, AUDITOR_PORT
from auditor.database import init_database
from auditor.routes.auth_routes import router as auth_router
from auditor.routes.inventory_routes import router as inventory_router
from auditor.exceptions import (
    AuditorException,
    BadRequestError,
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidAPIKeyError,
    InvalidNonceError,
    PermissionDeniedError,
    SiteNotFoundError,
    InventoryError
)

logger = setup_logging('auditor')

app = FastAPI(
    title="PDF Auditor",
    description="Network-wide PDF inventory service for multi-site installations",
    version="1.0.0"
)


def _error_response(status_code: int, exc: Exception, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": str(exc), "code": code}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database on application startup.
    """
    logger.info("Auditor service starting up...")

    init_database()
    logger.info("Database initialized")


@app.exception_handler(BadRequestError)
async def bad_request_handler(request: Request, exc: BadRequestError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Bad request error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, exc, "BAD_REQUEST")


@app.exception_handler(UserAlreadyExistsError)
async def user_already_exists_handler(request: Request, exc: UserAlreadyExistsError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"User already exists error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, exc, "USER_ALREADY_EXISTS")


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid credentials error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_401_UNAUTHORIZED, exc, "INVALID_CREDENTIALS")


@app.exception_handler(InvalidAPIKeyError)
async def invalid_api_key_handler(request: Request, exc: InvalidAPIKeyError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid API key error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_401_UNAUTHORIZED, exc, "INVALID_API_KEY")


@app.exception_handler(InvalidNonceError)
async def invalid_nonce_handler(request: Request, exc: InvalidNonceError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid nonce error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_403_FORBIDDEN, exc, "INVALID_NONCE")


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Permission denied error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_403_FORBIDDEN, exc, "PERMISSION_DENIED")


@app.exception_handler(SiteNotFoundError)
async def site_not_found_handler(request: Request, exc: SiteNotFoundError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Site not found error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_404_NOT_FOUND, exc, "SITE_NOT_FOUND")


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Inventory error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, exc.code)


@app.exception_handler(AuditorException)
async def auditor_exception_handler(request: Request, exc: AuditorException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Auditor exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "INTERNAL_ERROR")


app.include_router(auth_router)
app.include_router(inventory_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "PDF Auditor API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "auditor"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "auditor.main:app",
        host=AUDITOR_HOST,
        port=AUDITOR_PORT
    )


if __name__ == "__main__":
    main()
