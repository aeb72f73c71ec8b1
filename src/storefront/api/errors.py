"""HTTP mapping for domain errors that escape the application services."""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

logger = structlog.get_logger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Request rejected", path=request.url.path, errors=exc.messages)
    return JSONResponse(status_code=400, content={"errors": exc.messages})
