import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admin import router as admin_router
from auth import router as auth_router
from core import db, settings
from core.errors import RegistrationError, ValidationError
from payments import proofs
from payments import router as payments_router
from teams import router as teams_router

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process; failing here aborts startup.
    try:
        await db.init_pool()
    except Exception:
        logger.exception("db_pool_init_failed")
        raise
    try:
        yield
    finally:
        await proofs.drain_pending_deletions()
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RegistrationError)
async def handle_registration_error(request: Request, exc: RegistrationError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("request_failed path=%s kind=%s message=%s", request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def describe_request_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    # loc looks like ("body", "teamSize"); drop the request part.
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    detail = str(first.get("msg", "invalid value"))
    return f"Invalid {field}: {detail}." if field else f"Invalid request: {detail}."


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(describe_request_error(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.include_router(auth_router.router, tags=["auth"])
app.include_router(teams_router.router, tags=["teams"])
app.include_router(payments_router.router, tags=["payments"])
app.include_router(admin_router.router, tags=["admin"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "hackathon registration api"}
