from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quandl_app.api.routes import health, quandl
from quandl_app.ingestion.quandl import QuandlException, QuandlOptionsError
from quandl_app.utils.logger import logger

app = FastAPI(
    title="Quandl Data Pipeline",
    version="0.1.0",
    description="Read-only API for Quandl data and catalog metadata"
)

app.include_router(health.router)
app.include_router(quandl.router)


@app.exception_handler(QuandlOptionsError)
def options_error_handler(request: Request, exc: QuandlOptionsError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(QuandlException)
def quandl_error_handler(request: Request, exc: QuandlException):
    logger.error("Quandl request failed for {}: {}", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})
