import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from company_api.core.logging import configure_logging, request_id_var
from company_api.core.settings import settings
from company_api.db import init_db
from company_api.deps import close_publisher

from company_api.api.auth import router as auth_router
from company_api.api.company import router as company_router

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    init_db()
    logger.info("%s started env=%s", settings.APP_NAME, settings.ENV)
    try:
        yield
    finally:
        close_publisher()


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    token = request_id_var.set(rid)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers[REQUEST_ID_HEADER] = rid
    return response


# Corpo de erro no formato {"error": "..."} em todas as rotas
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    logger.info("invalid request body fields=%s", [e.get("loc") for e in exc.errors()])
    return JSONResponse(status_code=400, content={"error": "invalid request body"})


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal error"})


v1 = APIRouter(prefix="/api/v1")


@v1.get("/healthz")
def health():
    return {"status": "ok"}


v1.include_router(auth_router)
v1.include_router(company_router)
app.include_router(v1)
