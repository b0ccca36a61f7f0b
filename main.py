import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database import close_db, init_db
from api.admin_auth import router as admin_auth_router
from api.admin_submissions import router as admin_submissions_router
from api.intake import router as intake_router
from services.errors import ConfigurationError, StaleDataError, SubmissionNotFoundError
from services.validation import SubmissionValidationError

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info(
        "Relay mode=%s payload=%s encoding=%s two_stage=%s",
        settings.relay_mode.value,
        settings.privatelender_payload_mode.value,
        settings.privatelender_content_type.value,
        settings.privatelender_two_stage,
    )
    yield
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Loan intake review and lender relay API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SubmissionValidationError)
async def submission_validation_handler(request: Request, exc: SubmissionValidationError):
    return JSONResponse({"ok": False, "error": exc.flatten()}, status_code=400)


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError):
    return JSONResponse({"ok": False, "error": exc.errors, "message": str(exc)}, status_code=400)


@app.exception_handler(SubmissionNotFoundError)
async def not_found_handler(request: Request, exc: SubmissionNotFoundError):
    return JSONResponse({"ok": False, "error": "Not found"}, status_code=404)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return JSONResponse({"ok": False, "error": str(exc)}, status_code=500)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"ok": False, "error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


app.include_router(intake_router)
app.include_router(admin_auth_router)
app.include_router(admin_submissions_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
