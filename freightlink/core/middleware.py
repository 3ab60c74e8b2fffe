from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
import logging

from freightlink.config.settings import Settings
from freightlink.core.exceptions import ShipmentError
from freightlink.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

def setup_middleware(app: FastAPI, settings: Settings):
    """Configure all middleware for the application"""

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

    @app.exception_handler(ShipmentError)
    async def shipment_error_handler(request: Request, exc: ShipmentError):
        logger.warning(
            f"⚠️ {request.method} {request.url.path} - {exc.error_code}: {exc.detail}"
        )
        body = ErrorResponse(
            message=str(exc.detail),
            error_code=exc.error_code,
            detail=exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(mode="json")
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        logger.warning(
            f"⚠️ {request.method} {request.url.path} - validation_error: {len(errors)} invalid field(s)"
        )
        body = ErrorResponse(
            message="Request validation failed",
            error_code="validation_error",
            detail=errors
        )
        return JSONResponse(
            status_code=422,
            content=body.model_dump(mode="json")
        )
