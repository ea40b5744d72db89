import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stayhub.api.v1.router import router as v1_router
from stayhub.core.errors import DomainError
from stayhub.core.telemetry import setup_logging, setup_telemetry
from stayhub.schemas.common import ErrorResponse
from stayhub.schemas.validators import MESSAGE_ERROR_TYPES

setup_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="StayHub API", version="0.1.0")


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = ErrorResponse(code=exc.kind, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "Invalid value")
        # custom messages already name the field
        if err.get("type") not in MESSAGE_ERROR_TYPES and field:
            msg = f"{field}: {msg}"
        details.append({"field": field, "message": msg})

    body = ErrorResponse(
        code="validation_error",
        message=", ".join(d["message"] for d in details),
        details=details,
    )
    return JSONResponse(status_code=422, content=body.model_dump())


setup_telemetry(app)
app.include_router(v1_router)
